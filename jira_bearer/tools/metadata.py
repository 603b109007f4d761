"""Metadata tools: custom fields, issue types, statuses.

These change rarely and are served through the metadata cache.
"""

from fastmcp import FastMCP

from jira_bearer.tools.base import (
    ToolContext,
    ToolResponse,
    handle_request_errors,
    render,
)


CUSTOM_FIELDS_KEY = "custom-fields"
ISSUE_TYPES_KEY = "issue-types"
STATUSES_KEY = "statuses"


@handle_request_errors
async def get_custom_fields(ctx: ToolContext) -> ToolResponse:
    async def fetch() -> list[dict]:
        fields = await ctx.request("/rest/api/2/field")
        return [field for field in fields if field.get("custom")]

    data = await ctx.cache.get_or_fetch(CUSTOM_FIELDS_KEY, fetch)
    return ToolResponse.from_data(data)


@handle_request_errors
async def list_issue_types(ctx: ToolContext) -> ToolResponse:
    data = await ctx.cache.get_or_fetch(
        ISSUE_TYPES_KEY, lambda: ctx.request("/rest/api/2/issuetype")
    )
    return ToolResponse.from_data(data)


@handle_request_errors
async def list_statuses(ctx: ToolContext) -> ToolResponse:
    data = await ctx.cache.get_or_fetch(
        STATUSES_KEY, lambda: ctx.request("/rest/api/2/status")
    )
    return ToolResponse.from_data(data)


def register_metadata_tools(mcp: FastMCP, ctx: ToolContext) -> None:
    """Register all metadata-related tools."""

    @mcp.tool(
        name="jira-get-custom-fields",
        description=(
            "Get all custom field definitions from Jira. Returns field ID, name, "
            "and schema information. Cached for 5 minutes."
        ),
    )
    async def _get_custom_fields() -> str:
        return render(await get_custom_fields(ctx))

    @mcp.tool(
        name="jira-list-issue-types",
        description=(
            "Get list of all available issue types in Jira (Bug, Story, Task, etc.). "
            "Cached for 5 minutes."
        ),
    )
    async def _list_issue_types() -> str:
        return render(await list_issue_types(ctx))

    @mcp.tool(
        name="jira-list-statuses",
        description=(
            "Get list of all available issue statuses in Jira. Cached for 5 minutes."
        ),
    )
    async def _list_statuses() -> str:
        return render(await list_statuses(ctx))
