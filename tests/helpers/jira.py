"""Fake Jira backend and test doubles for the request layer."""

from collections.abc import Callable

import httpx

from jira_bearer.fetch.cache import TTLCache
from jira_bearer.fetch.client import RequestExecutor
from jira_bearer.fetch.models import Credentials, RequestPolicy
from jira_bearer.tools.base import ToolContext


BASE_URL = "https://jira.example.com"
TOKEN = "secret-token"

Handler = Callable[[httpx.Request], httpx.Response]


def make_credentials() -> Credentials:
    """Credentials pointing at the fake Jira base URL."""
    return Credentials(base_url=BASE_URL, bearer_token=TOKEN)


class FakeJira:
    """Scripted HTTP handler that records every request it receives.

    Responses are served in order; the last one repeats once the script
    runs out.
    """

    def __init__(self, *responses: httpx.Response) -> None:
        self.requests: list[httpx.Request] = []
        self._responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if len(self._responses) > 1:
            return self._responses.pop(0)
        return self._responses[0]

    @property
    def call_count(self) -> int:
        """Number of requests received."""
        return len(self.requests)

    @property
    def last(self) -> httpx.Request:
        """Most recent request."""
        return self.requests[-1]


class SleepRecorder:
    """Backoff sleep that records delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[int] = []

    async def __call__(self, delay_ms: int) -> None:
        self.delays.append(delay_ms)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        """Move the clock forward."""
        self.now += seconds


def make_executor(
    handler: Handler,
    policy: RequestPolicy | None = None,
    sleep: SleepRecorder | None = None,
) -> RequestExecutor:
    """Create an executor whose transport is the given handler."""
    return RequestExecutor(
        policy=policy,
        transport=httpx.MockTransport(handler),
        sleep=sleep if sleep is not None else SleepRecorder(),
    )


def make_context(
    handler: Handler,
    cache: TTLCache | None = None,
) -> ToolContext:
    """Create a tool context backed by the given handler."""
    return ToolContext(
        credentials=make_credentials(),
        executor=make_executor(handler),
        cache=cache if cache is not None else TTLCache(),
    )
