"""Comment tools."""

from typing import Annotated

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
async def get_issue_comments(ctx: ToolContext, issue_key: str) -> ToolResponse:
    data = await ctx.request(issue_endpoint(issue_key, "/comment"))
    return ToolResponse.from_data(data)


@handle_request_errors
async def add_comment(ctx: ToolContext, issue_key: str, body: str) -> ToolResponse:
    data = await ctx.request(
        issue_endpoint(issue_key, "/comment"), method="POST", json_body={"body": body}
    )
    return ToolResponse.from_data(data)


def register_comment_tools(mcp: FastMCP, ctx: ToolContext) -> None:
    """Register all comment-related tools."""

    @mcp.tool(
        name="jira-get-issue-comments",
        description="Get all comments for a specific Jira issue",
    )
    async def _get_issue_comments(issue_key: IssueRef) -> str:
        return render(await get_issue_comments(ctx, issue_key))

    @mcp.tool(name="jira-add-comment", description="Add a comment to a Jira issue")
    async def _add_comment(
        issue_key: IssueRef,
        body: Annotated[str, Field(min_length=1, description="Comment text")],
    ) -> str:
        return render(await add_comment(ctx, issue_key, body))
