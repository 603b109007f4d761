"""MCP server exposing Jira REST operations with bearer-token authentication."""

__version__ = "1.0.0"
