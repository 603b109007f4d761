"""Integration tests for the assembled MCP server over an in-memory client."""

import asyncio
import json
from typing import Any

import httpx
import pytest
from fastmcp import Client, FastMCP
from fastmcp.exceptions import ToolError

from jira_bearer.fetch.cache import TTLCache
from jira_bearer.fetch.metrics import RequestMetrics
from jira_bearer.server import SERVER_NAME, build_server
from tests.helpers.jira import (
    FakeClock,
    FakeJira,
    SleepRecorder,
    make_credentials,
    make_executor,
)


EXPECTED_TOOLS = {
    "jira-get-my-issues",
    "jira-get-recent-issues",
    "jira-search-issues",
    "jira-get-issue",
    "jira-create-issue",
    "jira-update-issue",
    "jira-delete-issue",
    "jira-get-issue-transitions",
    "jira-transition-issue",
    "jira-assign-issue",
    "jira-add-watcher",
    "jira-remove-watcher",
    "jira-link-issues",
    "jira-upload-attachment",
    "jira-get-issue-comments",
    "jira-add-comment",
    "jira-get-issue-worklogs",
    "jira-add-worklog",
    "jira-get-user",
    "jira-get-projects",
    "jira-get-project-details",
    "jira-get-project-versions",
    "jira-get-project-components",
    "jira-get-custom-fields",
    "jira-list-issue-types",
    "jira-list-statuses",
}


@pytest.fixture(autouse=True)
def reset_metrics() -> None:
    """Start every test with fresh counters."""
    RequestMetrics.reset()


def make_server(
    jira: FakeJira,
    sleep: SleepRecorder | None = None,
    cache: TTLCache | None = None,
) -> FastMCP:
    """Build the server against a fake Jira."""
    return build_server(
        make_credentials(),
        executor=make_executor(jira, sleep=sleep),
        cache=cache,
    )


def call_tool(server: FastMCP, name: str, arguments: dict[str, Any]) -> str:
    """Call one tool through an in-memory client and return its text."""

    async def scenario() -> str:
        async with Client(server) as client:
            result = await client.call_tool(name, arguments)
            return result.content[0].text

    return asyncio.run(scenario())


class TestToolListing:
    """Tests for tool registration."""

    @pytest.mark.integration
    def test_all_tools_registered(self) -> None:
        """Test that every Jira tool is advertised."""
        server = make_server(FakeJira(httpx.Response(200, json={})))

        async def scenario() -> list[Any]:
            async with Client(server) as client:
                return await client.list_tools()

        tools = asyncio.run(scenario())

        assert server.name == SERVER_NAME
        assert {tool.name for tool in tools} == EXPECTED_TOOLS

    @pytest.mark.integration
    def test_schema_publishes_bounds(self) -> None:
        """Test that argument constraints appear in the input schema."""
        server = make_server(FakeJira(httpx.Response(200, json={})))

        async def scenario() -> dict[str, Any]:
            async with Client(server) as client:
                tools = await client.list_tools()
                return {tool.name: tool.inputSchema for tool in tools}

        schemas = asyncio.run(scenario())

        search = schemas["jira-search-issues"]
        assert search["required"] == ["jql"]
        assert search["properties"]["max_results"]["maximum"] == 50
        assert search["properties"]["max_results"]["default"] == 50


class TestToolCalls:
    """Tests for calling tools end to end."""

    @pytest.mark.integration
    def test_get_issue(self) -> None:
        """Test a successful call returns Jira's JSON."""
        jira = FakeJira(httpx.Response(200, json={"key": "DEV-1"}))

        text = call_tool(make_server(jira), "jira-get-issue", {"issue_key": "DEV-1"})

        assert json.loads(text) == {"key": "DEV-1"}
        assert jira.last.headers["Authorization"] == "Bearer secret-token"

    @pytest.mark.integration
    def test_not_found_is_tool_error(self) -> None:
        """Test that Jira errors surface as tool errors."""
        jira = FakeJira(
            httpx.Response(404, json={"errorMessages": ["Issue does not exist"]})
        )

        with pytest.raises(ToolError, match="Resource not found"):
            call_tool(make_server(jira), "jira-get-issue", {"issue_key": "DEV-404"})

        assert jira.call_count == 1

    @pytest.mark.integration
    def test_gateway_error_is_retried(self) -> None:
        """Test that retries happen below the tool layer."""
        jira = FakeJira(
            httpx.Response(502),
            httpx.Response(200, json=[{"key": "CORE", "name": "Core"}]),
        )
        sleep = SleepRecorder()

        text = call_tool(make_server(jira, sleep), "jira-get-projects", {})

        assert jira.call_count == 2
        assert sleep.delays == [1000]
        assert text == "Returned: 1, StartAt: 0, HasMore: false\n\nCORE: Core"

    @pytest.mark.integration
    def test_uses_injected_cache(self) -> None:
        """Test that metadata expires on the clock of the supplied cache."""
        jira = FakeJira(httpx.Response(200, json=[{"name": "Open"}]))
        clock = FakeClock()
        server = make_server(jira, cache=TTLCache(clock=clock))

        async def scenario() -> None:
            async with Client(server) as client:
                await client.call_tool("jira-list-statuses", {})
                await client.call_tool("jira-list-statuses", {})
                assert jira.call_count == 1

                clock.advance(301.0)
                await client.call_tool("jira-list-statuses", {})

        asyncio.run(scenario())

        assert jira.call_count == 2

    @pytest.mark.integration
    @pytest.mark.parametrize(
        ("name", "arguments"),
        [
            ("jira-get-issue", {"issue_key": "not-a-key"}),
            ("jira-search-issues", {"jql": "project = X", "max_results": 51}),
            ("jira-search-issues", {"jql": ""}),
            (
                "jira-create-issue",
                {"project_key": "dev", "issue_type": "Bug", "summary": "x"},
            ),
            ("jira-get-projects", {"start_at": -1}),
        ],
    )
    def test_invalid_arguments_rejected(
        self, name: str, arguments: dict[str, Any]
    ) -> None:
        """Test that invalid arguments never reach Jira."""
        jira = FakeJira(httpx.Response(200, json={}))

        with pytest.raises(ToolError):
            call_tool(make_server(jira), name, arguments)

        assert jira.call_count == 0
