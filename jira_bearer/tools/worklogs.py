"""Worklog (time tracking) tools."""

from typing import Annotated, Any

from fastmcp import FastMCP
from pydantic import Field

from jira_bearer.tools.base import (
    ToolContext,
    ToolResponse,
    handle_request_errors,
    render,
)
from jira_bearer.tools.issues import issue_endpoint
from jira_bearer.tools.validation import IssueRef


@handle_request_errors
async def get_issue_worklogs(ctx: ToolContext, issue_key: str) -> ToolResponse:
    data = await ctx.request(issue_endpoint(issue_key, "/worklog"))
    return ToolResponse.from_data(data)


@handle_request_errors
async def add_worklog(
    ctx: ToolContext,
    issue_key: str,
    time_spent: str,
    comment: str | None = None,
    started: str | None = None,
) -> ToolResponse:
    """Log time against an issue. Jira defaults ``started`` to now."""
    worklog: dict[str, Any] = {"timeSpent": time_spent}
    if comment:
        worklog["comment"] = comment
    if started:
        worklog["started"] = started

    data = await ctx.request(
        issue_endpoint(issue_key, "/worklog"), method="POST", json_body=worklog
    )
    return ToolResponse.from_data(data)


def register_worklog_tools(mcp: FastMCP, ctx: ToolContext) -> None:
    """Register all worklog-related tools."""

    @mcp.tool(
        name="jira-get-issue-worklogs",
        description=(
            "Get all worklogs (time tracking entries) for a specific Jira issue"
        ),
    )
    async def _get_issue_worklogs(issue_key: IssueRef) -> str:
        return render(await get_issue_worklogs(ctx, issue_key))

    @mcp.tool(
        name="jira-add-worklog",
        description="Add a worklog entry (time tracking) to a Jira issue",
    )
    async def _add_worklog(
        issue_key: IssueRef,
        time_spent: Annotated[
            str,
            Field(
                min_length=1,
                description=(
                    "Time spent in Jira format "
                    '(e.g., "3h 30m", "1d", "2w 3d 4h")'
                ),
            ),
        ],
        comment: Annotated[
            str | None, Field(description="Optional comment for the worklog entry")
        ] = None,
        started: Annotated[
            str | None,
            Field(
                description=(
                    "Optional start date/time in ISO 8601 format "
                    '(e.g., "2025-10-08T14:30:00.000+0000"). Defaults to now.'
                )
            ),
        ] = None,
    ) -> str:
        return render(await add_worklog(ctx, issue_key, time_spent, comment, started))
