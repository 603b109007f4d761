"""Input constraints for tool arguments.

Declared as Annotated types so the MCP server publishes them in each
tool's input schema and rejects invalid arguments before a handler runs.
"""

from pathlib import Path
from typing import Annotated

from pydantic import Field


ISSUE_KEY_PATTERN = r"^[A-Z][A-Z0-9]*-\d+$"
PROJECT_KEY_PATTERN = r"^[A-Z][A-Z0-9]*$"

MAX_RESULTS_LIMIT = 50
SUMMARY_MAX_LENGTH = 255

IssueKey = Annotated[
    str,
    Field(
        pattern=ISSUE_KEY_PATTERN,
        description='Issue key (e.g., "DEV-123")',
    ),
]
IssueRef = Annotated[
    str, Field(min_length=1, description='Issue key or id (e.g., "DEV-123")')
]
ProjectKey = Annotated[
    str,
    Field(
        pattern=PROJECT_KEY_PATTERN,
        description='Project key (e.g., "DEV")',
    ),
]
ProjectRef = Annotated[
    str, Field(min_length=1, description='Project key (e.g., "DEV", "CORE")')
]
Jql = Annotated[
    str,
    Field(
        min_length=1,
        description='JQL query string (e.g., "project = CORE AND status = Open")',
    ),
]
Summary = Annotated[
    str,
    Field(
        min_length=1,
        max_length=SUMMARY_MAX_LENGTH,
        description="Issue summary/title (max 255 characters)",
    ),
]
StartAt = Annotated[
    int, Field(ge=0, description="Starting index for pagination (default: 0)")
]
FieldList = Annotated[
    list[str] | None,
    Field(
        description=(
            'Optional field names to return (e.g., ["summary", "status"]). '
            "If omitted, returns all fields."
        ),
    ),
]
MaxResults = Annotated[
    int,
    Field(
        ge=1,
        le=MAX_RESULTS_LIMIT,
        description="Maximum number of results to return (max 50)",
    ),
]


def is_valid_file_path(file_path: str, root: Path | None = None) -> bool:
    """Check that a path resolves inside root (default: working directory).

    Args:
        file_path: Path supplied by the caller.
        root: Directory the path must stay within.

    Returns:
        True if the resolved path is inside root.
    """
    base = (root or Path.cwd()).resolve()
    return Path(file_path).resolve().is_relative_to(base)
