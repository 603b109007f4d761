"""Tool handlers and their registration on the MCP server."""

from jira_bearer.tools.base import ToolContext, ToolResponse, render
from jira_bearer.tools.comments import register_comment_tools
from jira_bearer.tools.issues import register_issue_tools
from jira_bearer.tools.metadata import register_metadata_tools
from jira_bearer.tools.projects import register_project_tools
from jira_bearer.tools.users import register_user_tools
from jira_bearer.tools.worklogs import register_worklog_tools


__all__ = [
    "ToolContext",
    "ToolResponse",
    "render",
    "register_comment_tools",
    "register_issue_tools",
    "register_metadata_tools",
    "register_project_tools",
    "register_user_tools",
    "register_worklog_tools",
]
