"""User tools."""

from typing import Annotated

from fastmcp import FastMCP
from pydantic import Field

from jira_bearer.tools.base import (
    ToolContext,
    ToolResponse,
    handle_request_errors,
    query,
    render,
)


@handle_request_errors
async def get_user(ctx: ToolContext, username: str | None = None) -> ToolResponse:
    """Look up a user, or the authenticated user when username is omitted."""
    if username:
        endpoint = f"/rest/api/2/user?{query({'username': username})}"
    else:
        endpoint = "/rest/api/2/myself"
    data = await ctx.request(endpoint)
    return ToolResponse.from_data(data)


def register_user_tools(mcp: FastMCP, ctx: ToolContext) -> None:
    """Register all user-related tools."""

    @mcp.tool(
        name="jira-get-user",
        description=(
            "Get details of a Jira user. Omit username to get current "
            "authenticated user."
        ),
    )
    async def _get_user(
        username: Annotated[
            str | None,
            Field(description="Username to lookup (omit for current user)"),
        ] = None,
    ) -> str:
        return render(await get_user(ctx, username))
