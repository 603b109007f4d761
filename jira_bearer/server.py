"""MCP server assembly."""

from fastmcp import FastMCP

from jira_bearer.fetch.cache import TTLCache
from jira_bearer.fetch.client import RequestExecutor
from jira_bearer.fetch.models import Credentials
from jira_bearer.tools import (
    ToolContext,
    register_comment_tools,
    register_issue_tools,
    register_metadata_tools,
    register_project_tools,
    register_user_tools,
    register_worklog_tools,
)


SERVER_NAME = "jira-bearer-auth"


def build_server(
    credentials: Credentials,
    executor: RequestExecutor | None = None,
    cache: TTLCache | None = None,
) -> FastMCP:
    """Create the MCP server with every Jira tool registered.

    Args:
        credentials: Jira base URL and bearer token.
        executor: Request executor; a default one is created if omitted.
        cache: Metadata cache; a fresh one is created if omitted.

    Returns:
        Configured FastMCP server.
    """
    ctx = ToolContext(
        credentials=credentials,
        executor=executor if executor is not None else RequestExecutor(),
        cache=cache if cache is not None else TTLCache(),
    )

    mcp = FastMCP(
        name=SERVER_NAME,
        instructions="Provides tools for Jira issues, projects and metadata "
        "using bearer-token authentication.",
    )
    register_issue_tools(mcp, ctx)
    register_comment_tools(mcp, ctx)
    register_worklog_tools(mcp, ctx)
    register_project_tools(mcp, ctx)
    register_user_tools(mcp, ctx)
    register_metadata_tools(mcp, ctx)
    return mcp
