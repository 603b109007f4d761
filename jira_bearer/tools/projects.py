"""Project tools.

Responses are trimmed to the fields an agent needs, keeping tool output
small for large Jira instances.
"""

from typing import Any

from fastmcp import FastMCP

from jira_bearer.tools.base import (
    ToolContext,
    ToolResponse,
    handle_request_errors,
    query,
    render,
    segment,
    to_json_text,
)
from jira_bearer.tools.validation import (
    MAX_RESULTS_LIMIT,
    MaxResults,
    ProjectRef,
    StartAt,
)


PROJECT_ENDPOINT = "/rest/api/2/project"
MAX_LISTED_COMPONENTS = 10


def _lead_name(entity: dict[str, Any]) -> str | None:
    lead = entity.get("lead") or {}
    return lead.get("displayName") or lead.get("name")


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


def summarize_project(data: dict[str, Any]) -> dict[str, Any]:
    """Reduce a project payload to its essential fields.

    At most MAX_LISTED_COMPONENTS components are listed; the rest are
    summarized by count.
    """
    components = data.get("components")
    issue_types = data.get("issueTypes")

    listed: list[str] | None = None
    if components is not None:
        listed = [
            f"{c['name']}: {c['description']}" if c.get("description") else c["name"]
            for c in components[:MAX_LISTED_COMPONENTS]
        ]
        hidden = len(components) - MAX_LISTED_COMPONENTS
        if hidden > 0:
            listed.append(f"... and {hidden} more components")

    return _drop_none(
        {
            "key": data.get("key"),
            "name": data.get("name"),
            "description": data.get("description"),
            "lead": _lead_name(data),
            "projectTypeKey": data.get("projectTypeKey"),
            "archived": data.get("archived"),
            "componentCount": len(components or []),
            "versionCount": len(data.get("versions") or []),
            "issueTypeCount": len(issue_types or []),
            "components": listed,
            "issueTypes": [t["name"] for t in issue_types] if issue_types else None,
        }
    )


def format_project_list(
    projects: list[dict[str, Any]], max_results: int, start_at: int
) -> str:
    """Render a project page as a pagination line and ``KEY: Name`` lines."""
    has_more = "true" if len(projects) == max_results else "false"
    summary = f"Returned: {len(projects)}, StartAt: {start_at}, HasMore: {has_more}"
    lines = "\n".join(f"{p['key']}: {p['name']}" for p in projects)
    return f"{summary}\n\n{lines}"


@handle_request_errors
async def get_projects(
    ctx: ToolContext, max_results: int = 10, start_at: int = 0
) -> ToolResponse:
    cache_key = f"projects-{max_results}-{start_at}"
    params = {"maxResults": min(max_results, MAX_RESULTS_LIMIT), "startAt": start_at}
    data = await ctx.cache.get_or_fetch(
        cache_key, lambda: ctx.request(f"{PROJECT_ENDPOINT}?{query(params)}")
    )
    return ToolResponse.success(format_project_list(data, max_results, start_at))


@handle_request_errors
async def get_project_details(ctx: ToolContext, project_key: str) -> ToolResponse:
    data = await ctx.request(f"{PROJECT_ENDPOINT}/{segment(project_key)}")
    return ToolResponse.success(to_json_text(summarize_project(data)))


@handle_request_errors
async def get_project_versions(ctx: ToolContext, project_key: str) -> ToolResponse:
    data = await ctx.request(f"{PROJECT_ENDPOINT}/{segment(project_key)}/versions")
    versions = [
        _drop_none(
            {
                "id": v.get("id"),
                "name": v.get("name"),
                "archived": v.get("archived", False),
                "released": v.get("released", False),
                "releaseDate": v.get("releaseDate"),
                "description": v.get("description"),
            }
        )
        for v in data
    ]
    return ToolResponse.from_data(versions)


@handle_request_errors
async def get_project_components(ctx: ToolContext, project_key: str) -> ToolResponse:
    data = await ctx.request(f"{PROJECT_ENDPOINT}/{segment(project_key)}/components")
    components = [
        _drop_none(
            {
                "id": c.get("id"),
                "name": c.get("name"),
                "description": c.get("description"),
                "lead": _lead_name(c),
            }
        )
        for c in data
    ]
    return ToolResponse.from_data(components)


def register_project_tools(mcp: FastMCP, ctx: ToolContext) -> None:
    """Register all project-related tools."""

    @mcp.tool(
        name="jira-get-projects",
        description=(
            "Get list of all accessible Jira projects with pagination. Returns key "
            "and name for each project. Cached for 5 minutes."
        ),
    )
    async def _get_projects(max_results: MaxResults = 10, start_at: StartAt = 0) -> str:
        return render(await get_projects(ctx, max_results, start_at))

    @mcp.tool(
        name="jira-get-project-details",
        description="Get detailed information about a specific Jira project",
    )
    async def _get_project_details(project_key: ProjectRef) -> str:
        return render(await get_project_details(ctx, project_key))

    @mcp.tool(
        name="jira-get-project-versions",
        description=(
            "Get all versions (releases) for a specific Jira project. "
            "Useful for creating issues with fix versions."
        ),
    )
    async def _get_project_versions(project_key: ProjectRef) -> str:
        return render(await get_project_versions(ctx, project_key))

    @mcp.tool(
        name="jira-get-project-components",
        description=(
            "Get all components for a specific Jira project. "
            "Useful for creating issues with components."
        ),
    )
    async def _get_project_components(project_key: ProjectRef) -> str:
        return render(await get_project_components(ctx, project_key))
