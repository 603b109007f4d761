"""Shared plumbing for tool handlers.

Handlers receive a ToolContext, call the request executor (optionally
through the metadata cache) and return a ToolResponse. Request failures
and malformed payloads become error responses; they never escape a
handler.
"""

import functools
import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Literal, ParamSpec
from urllib.parse import quote, urlencode

import structlog
from fastmcp.exceptions import ToolError
from pydantic import BaseModel, ConfigDict

from jira_bearer.fetch.cache import TTLCache
from jira_bearer.fetch.client import RequestExecutor
from jira_bearer.fetch.models import Credentials, JiraRequestError
from jira_bearer.observability.logging import bind_tool_context, clear_tool_context


logger = structlog.get_logger()

P = ParamSpec("P")


class TextContent(BaseModel):
    """One text block of a tool response."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["text"] = "text"
    text: str


class ToolResponse(BaseModel):
    """Success/error envelope returned by every tool handler."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    content: list[TextContent]
    is_error: bool = False

    @classmethod
    def success(cls, text: str) -> "ToolResponse":
        """Build a successful text response."""
        return cls(content=[TextContent(text=text)])

    @classmethod
    def from_data(cls, data: Any) -> "ToolResponse":
        """Build a successful response holding pretty-printed JSON."""
        return cls.success(to_json_text(data))

    @classmethod
    def failure(cls, message: str) -> "ToolResponse":
        """Build an error response."""
        return cls(content=[TextContent(text=f"Error: {message}")], is_error=True)

    @property
    def text(self) -> str:
        """All text blocks joined by newlines."""
        return "\n".join(block.text for block in self.content)


@dataclass(frozen=True)
class ToolContext:
    """Collaborators shared by all handlers for the life of the server."""

    credentials: Credentials
    executor: RequestExecutor
    cache: TTLCache

    async def request(self, endpoint: str, **options: Any) -> Any:
        """Call the executor with this context's credentials."""
        return await self.executor.call(self.credentials, endpoint, **options)


def to_json_text(data: Any) -> str:
    """Serialize data the way tool responses present it."""
    return json.dumps(data, indent=2, ensure_ascii=False)


def segment(value: str) -> str:
    """Percent-encode a value for use as a single URL path segment."""
    return quote(value, safe="")


def query(params: dict[str, Any]) -> str:
    """Encode query parameters, dropping None values.

    Commas stay literal so field lists read as ``fields=a,b``.
    """
    present = {k: v for k, v in params.items() if v is not None}
    return urlencode(present, quote_via=quote, safe=",")


def handle_request_errors(
    func: Callable[P, Awaitable[ToolResponse]],
) -> Callable[P, Awaitable[ToolResponse]]:
    """Convert any exception raised by a handler into an error response."""

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> ToolResponse:
        bind_tool_context(func.__name__)
        try:
            return await func(*args, **kwargs)
        except JiraRequestError as e:
            logger.warning("tool_failed", **e.to_dict())
            return ToolResponse.failure(e.message)
        except Exception as e:  # noqa: BLE001
            logger.exception("tool_crashed", error=str(e))
            return ToolResponse.failure(str(e))
        finally:
            clear_tool_context()

    return wrapper


def render(response: ToolResponse) -> str:
    """Render a handler response for the MCP server.

    Raises:
        ToolError: For error responses, so the client sees isError.
    """
    if response.is_error:
        raise ToolError(response.text)
    return response.text
