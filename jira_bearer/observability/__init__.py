"""Observability module for structured logging."""

from jira_bearer.observability.logging import (
    bind_tool_context,
    clear_tool_context,
    configure_logging,
)


__all__ = [
    "bind_tool_context",
    "clear_tool_context",
    "configure_logging",
]
