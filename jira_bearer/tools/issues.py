"""Issue tools: search, CRUD, transitions, assignment, watchers, links, attachments."""

import asyncio
from pathlib import Path
from typing import Annotated, Any, Literal

from fastmcp import FastMCP
from pydantic import Field

from jira_bearer.tools.base import (
    ToolContext,
    ToolResponse,
    handle_request_errors,
    query,
    render,
    segment,
)
from jira_bearer.tools.validation import (
    FieldList,
    IssueKey,
    IssueRef,
    Jql,
    MaxResults,
    ProjectKey,
    StartAt,
    Summary,
    is_valid_file_path,
)


SEARCH_ENDPOINT = "/rest/api/2/search"
ISSUE_ENDPOINT = "/rest/api/2/issue"
UNASSIGN = "-1"

RecencyType = Literal["updated", "viewed"]

RECENT_JQL: dict[str, str] = {
    "updated": (
        "(assignee = currentUser() OR watcher = currentUser()) ORDER BY updated DESC"
    ),
    "viewed": "issue in issueHistory() ORDER BY lastViewed DESC",
}


def search_endpoint(
    jql: str,
    max_results: int,
    start_at: int | None = None,
    fields: list[str] | None = None,
) -> str:
    """Build the search endpoint for a JQL query."""
    params = {
        "jql": jql,
        "maxResults": max_results,
        "startAt": start_at,
        "fields": ",".join(fields) if fields else None,
    }
    return f"{SEARCH_ENDPOINT}?{query(params)}"


def my_issues_jql(status: str | None = None, project: str | None = None) -> str:
    """Build the JQL for issues assigned to the current user."""
    jql = "assignee = currentUser()"
    if status:
        jql += f' AND status = "{status}"'
    if project:
        jql += f" AND project = {project}"
    return jql + " ORDER BY updated DESC"


def issue_endpoint(issue_key: str, suffix: str = "") -> str:
    """Build the endpoint for an issue or one of its sub-resources."""
    return f"{ISSUE_ENDPOINT}/{segment(issue_key)}{suffix}"


@handle_request_errors
async def search_issues(
    ctx: ToolContext,
    jql: str,
    max_results: int = 50,
    start_at: int = 0,
    fields: list[str] | None = None,
) -> ToolResponse:
    data = await ctx.request(search_endpoint(jql, max_results, start_at, fields))
    return ToolResponse.from_data(data)


@handle_request_errors
async def get_my_issues(
    ctx: ToolContext,
    max_results: int = 50,
    start_at: int = 0,
    status: str | None = None,
    project: str | None = None,
    fields: list[str] | None = None,
) -> ToolResponse:
    jql = my_issues_jql(status, project)
    data = await ctx.request(search_endpoint(jql, max_results, start_at, fields))
    return ToolResponse.from_data(data)


@handle_request_errors
async def get_recent_issues(
    ctx: ToolContext,
    max_results: int = 20,
    recency: RecencyType = "updated",
    fields: list[str] | None = None,
) -> ToolResponse:
    jql = RECENT_JQL[recency]
    data = await ctx.request(search_endpoint(jql, max_results, fields=fields))
    return ToolResponse.from_data(data)


@handle_request_errors
async def get_issue(
    ctx: ToolContext,
    issue_key: str,
    fields: list[str] | None = None,
) -> ToolResponse:
    endpoint = issue_endpoint(issue_key)
    if fields:
        endpoint += f"?{query({'fields': ','.join(fields)})}"
    data = await ctx.request(endpoint)
    return ToolResponse.from_data(data)


@handle_request_errors
async def create_issue(
    ctx: ToolContext,
    project_key: str,
    issue_type: str,
    summary: str,
    description: str | None = None,
    fields: dict[str, Any] | None = None,
) -> ToolResponse:
    """Create an issue.

    Additional fields are merged after the core fields, so they may add
    custom fields and components or replace a core value.
    """
    issue_fields: dict[str, Any] = {
        "project": {"key": project_key},
        "issuetype": {"name": issue_type},
        "summary": summary,
    }
    if description:
        issue_fields["description"] = description
    issue_fields.update(fields or {})

    data = await ctx.request(
        ISSUE_ENDPOINT, method="POST", json_body={"fields": issue_fields}
    )
    return ToolResponse.from_data(data)


@handle_request_errors
async def update_issue(
    ctx: ToolContext,
    issue_key: str,
    summary: str | None = None,
    description: str | None = None,
    fields: dict[str, Any] | None = None,
) -> ToolResponse:
    update_fields: dict[str, Any] = dict(fields or {})
    if summary:
        update_fields["summary"] = summary
    if description:
        update_fields["description"] = description

    await ctx.request(
        issue_endpoint(issue_key), method="PUT", json_body={"fields": update_fields}
    )
    return ToolResponse.success(f"Issue {issue_key} updated successfully")


@handle_request_errors
async def delete_issue(ctx: ToolContext, issue_key: str) -> ToolResponse:
    await ctx.request(issue_endpoint(issue_key), method="DELETE")
    return ToolResponse.success(f"Issue {issue_key} deleted successfully")


@handle_request_errors
async def get_issue_transitions(ctx: ToolContext, issue_key: str) -> ToolResponse:
    data = await ctx.request(issue_endpoint(issue_key, "/transitions"))
    return ToolResponse.from_data(data)


@handle_request_errors
async def transition_issue(
    ctx: ToolContext, issue_key: str, transition_id: str
) -> ToolResponse:
    await ctx.request(
        issue_endpoint(issue_key, "/transitions"),
        method="POST",
        json_body={"transition": {"id": transition_id}},
    )
    return ToolResponse.success(f"Issue {issue_key} transitioned successfully")


@handle_request_errors
async def assign_issue(
    ctx: ToolContext, issue_key: str, username: str | None = None
) -> ToolResponse:
    """Assign an issue, or unassign it when username is omitted or "-1"."""
    assignee = None if username in (None, UNASSIGN) else username
    await ctx.request(
        issue_endpoint(issue_key, "/assignee"),
        method="PUT",
        json_body={"name": assignee},
    )
    action = f"assigned to {assignee}" if assignee else "unassigned"
    return ToolResponse.success(f"Issue {issue_key} {action} successfully")


@handle_request_errors
async def add_watcher(ctx: ToolContext, issue_key: str, username: str) -> ToolResponse:
    # The watchers endpoint takes a bare JSON string
    await ctx.request(
        issue_endpoint(issue_key, "/watchers"), method="POST", json_body=username
    )
    return ToolResponse.success(
        f"User {username} added as watcher to issue {issue_key}"
    )


@handle_request_errors
async def remove_watcher(
    ctx: ToolContext, issue_key: str, username: str
) -> ToolResponse:
    endpoint = issue_endpoint(issue_key, f"/watchers?{query({'username': username})}")
    await ctx.request(endpoint, method="DELETE")
    return ToolResponse.success(
        f"User {username} removed as watcher from issue {issue_key}"
    )


@handle_request_errors
async def link_issues(
    ctx: ToolContext, link_type: str, inward_issue: str, outward_issue: str
) -> ToolResponse:
    link = {
        "type": {"name": link_type},
        "inwardIssue": {"key": inward_issue},
        "outwardIssue": {"key": outward_issue},
    }
    await ctx.request("/rest/api/2/issueLink", method="POST", json_body=link)
    return ToolResponse.success(
        f"Successfully created {link_type} link between {inward_issue} "
        f"and {outward_issue}"
    )


@handle_request_errors
async def upload_attachment(
    ctx: ToolContext,
    issue_key: str,
    file_path: str,
    root: Path | None = None,
) -> ToolResponse:
    """Upload a file as an attachment.

    The path must resolve inside root (the working directory by default).
    """
    if not is_valid_file_path(file_path, root):
        return ToolResponse.failure(
            "File path must be within the current working directory"
        )

    path = Path(file_path)
    try:
        content = await asyncio.to_thread(path.read_bytes)
    except OSError as e:
        return ToolResponse.failure(f"Cannot read {file_path}: {e.strerror or e}")

    data = await ctx.request(
        issue_endpoint(issue_key, "/attachments"),
        method="POST",
        headers={"X-Atlassian-Token": "no-check"},
        files={"file": (path.name, content)},
    )
    return ToolResponse.from_data(data)


def register_issue_tools(mcp: FastMCP, ctx: ToolContext) -> None:
    """Register all issue-related tools."""

    @mcp.tool(
        name="jira-get-my-issues",
        description=(
            "Get issues assigned to the current user. Shorthand for "
            '"assignee = currentUser()" JQL query.'
        ),
    )
    async def _get_my_issues(
        max_results: MaxResults = 50,
        start_at: StartAt = 0,
        status: Annotated[
            str | None,
            Field(description='Optional status filter (e.g., "Open", "In Progress")'),
        ] = None,
        project: Annotated[
            str | None, Field(description='Optional project key filter (e.g., "DEV")')
        ] = None,
        fields: FieldList = None,
    ) -> str:
        return render(
            await get_my_issues(ctx, max_results, start_at, status, project, fields)
        )

    @mcp.tool(
        name="jira-get-recent-issues",
        description="Get recently updated or viewed issues for the current user",
    )
    async def _get_recent_issues(
        max_results: MaxResults = 20,
        type: Annotated[  # noqa: A002
            RecencyType,
            Field(
                description=(
                    'Type of recency: "updated" (recently updated) or '
                    '"viewed" (recently viewed by you)'
                )
            ),
        ] = "updated",
        fields: FieldList = None,
    ) -> str:
        return render(await get_recent_issues(ctx, max_results, type, fields))

    @mcp.tool(
        name="jira-search-issues",
        description="Search for Jira issues using JQL (Jira Query Language)",
    )
    async def _search_issues(
        jql: Jql,
        max_results: MaxResults = 50,
        start_at: StartAt = 0,
        fields: FieldList = None,
    ) -> str:
        return render(await search_issues(ctx, jql, max_results, start_at, fields))

    @mcp.tool(name="jira-get-issue", description="Get details of a specific Jira issue")
    async def _get_issue(issue_key: IssueKey, fields: FieldList = None) -> str:
        return render(await get_issue(ctx, issue_key, fields))

    @mcp.tool(name="jira-create-issue", description="Create a new Jira issue")
    async def _create_issue(
        project_key: ProjectKey,
        issue_type: Annotated[
            str,
            Field(
                min_length=1,
                description='Issue type name (e.g., "Bug", "Story", "Task")',
            ),
        ],
        summary: Summary,
        description: Annotated[
            str | None, Field(description="Issue description")
        ] = None,
        fields: Annotated[
            dict[str, Any] | None,
            Field(description="Additional custom fields as JSON object"),
        ] = None,
    ) -> str:
        return render(
            await create_issue(
                ctx, project_key, issue_type, summary, description, fields
            )
        )

    @mcp.tool(name="jira-update-issue", description="Update an existing Jira issue")
    async def _update_issue(
        issue_key: IssueRef,
        summary: Annotated[
            str | None, Field(description="Updated summary/title")
        ] = None,
        description: Annotated[
            str | None, Field(description="Updated description")
        ] = None,
        fields: Annotated[
            dict[str, Any] | None,
            Field(description="Additional fields to update as JSON object"),
        ] = None,
    ) -> str:
        return render(await update_issue(ctx, issue_key, summary, description, fields))

    @mcp.tool(name="jira-delete-issue", description="Delete a Jira issue permanently")
    async def _delete_issue(issue_key: IssueRef) -> str:
        return render(await delete_issue(ctx, issue_key))

    @mcp.tool(
        name="jira-get-issue-transitions",
        description=(
            "Get available transitions for a Jira issue "
            "(to see what status changes are possible)"
        ),
    )
    async def _get_issue_transitions(issue_key: IssueRef) -> str:
        return render(await get_issue_transitions(ctx, issue_key))

    @mcp.tool(
        name="jira-transition-issue",
        description=(
            "Transition a Jira issue to a new status. Use "
            "jira-get-issue-transitions first to see available transitions."
        ),
    )
    async def _transition_issue(
        issue_key: IssueRef,
        transition_id: Annotated[
            str,
            Field(
                min_length=1,
                description="Transition ID (from jira-get-issue-transitions)",
            ),
        ],
    ) -> str:
        return render(await transition_issue(ctx, issue_key, transition_id))

    @mcp.tool(
        name="jira-assign-issue",
        description="Assign a Jira issue to a user, or unassign it",
    )
    async def _assign_issue(
        issue_key: IssueRef,
        username: Annotated[
            str | None,
            Field(description='Username to assign (omit or use "-1" to unassign)'),
        ] = None,
    ) -> str:
        return render(await assign_issue(ctx, issue_key, username))

    @mcp.tool(
        name="jira-add-watcher",
        description="Add a user as a watcher to a Jira issue",
    )
    async def _add_watcher(
        issue_key: IssueRef,
        username: Annotated[
            str, Field(min_length=1, description="Username to add as watcher")
        ],
    ) -> str:
        return render(await add_watcher(ctx, issue_key, username))

    @mcp.tool(
        name="jira-remove-watcher",
        description="Remove a user as a watcher from a Jira issue",
    )
    async def _remove_watcher(
        issue_key: IssueRef,
        username: Annotated[
            str, Field(min_length=1, description="Username to remove as watcher")
        ],
    ) -> str:
        return render(await remove_watcher(ctx, issue_key, username))

    @mcp.tool(
        name="jira-link-issues",
        description="Create a link between two Jira issues",
    )
    async def _link_issues(
        type: Annotated[  # noqa: A002
            str,
            Field(
                min_length=1,
                description='Link type name (e.g., "Blocks", "Relates", "Duplicates")',
            ),
        ],
        inward_issue: Annotated[
            str, Field(min_length=1, description='Inward issue key (e.g., "DEV-123")')
        ],
        outward_issue: Annotated[
            str, Field(min_length=1, description='Outward issue key (e.g., "DEV-456")')
        ],
    ) -> str:
        return render(await link_issues(ctx, type, inward_issue, outward_issue))

    @mcp.tool(
        name="jira-upload-attachment",
        description="Upload a file attachment to a Jira issue",
    )
    async def _upload_attachment(
        issue_key: IssueKey,
        file_path: Annotated[
            str,
            Field(
                min_length=1,
                description="File path to upload (must be within current directory)",
            ),
        ],
    ) -> str:
        return render(await upload_attachment(ctx, issue_key, file_path))
