"""Authenticated Jira REST requests with timeout, retries, and classification."""

import asyncio
import json
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, NoReturn

import httpx
import structlog

from jira_bearer.fetch.classify import classify_status, enrich_message
from jira_bearer.fetch.constants import (
    HTTP_STATUS_NO_CONTENT,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    USER_AGENT,
)
from jira_bearer.fetch.metrics import RequestMetrics
from jira_bearer.fetch.models import (
    Credentials,
    ErrorClass,
    JiraRequestError,
    RequestPolicy,
)
from jira_bearer.fetch.redact import redact_headers


logger = structlog.get_logger()

SleepFn = Callable[[int], Awaitable[None]]
FilesArg = Mapping[str, tuple[str, bytes]]


async def sleep_ms(delay_ms: int) -> None:
    """Suspend the calling coroutine for delay_ms milliseconds."""
    await asyncio.sleep(delay_ms / 1000.0)


class RequestExecutor:
    """Executes one logical Jira request per call.

    A call may span several physical attempts: 502, 503 and 504 are
    retried with linear backoff up to the retry budget. Every other
    failure is terminal on first occurrence, including timeouts.

    The executor holds no per-call state and is safe to share between
    concurrent calls.
    """

    def __init__(
        self,
        policy: RequestPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: SleepFn = sleep_ms,
    ) -> None:
        """Initialize the executor.

        Args:
            policy: Timeout and retry settings.
            transport: Optional httpx transport (tests inject a mock).
            sleep: Backoff sleep taking milliseconds.
        """
        self._policy = policy or RequestPolicy()
        self._transport = transport
        self._sleep = sleep
        self._metrics = RequestMetrics.get_instance()
        self._log = logger.bind(component="request")

    @property
    def policy(self) -> RequestPolicy:
        """Timeout and retry settings in use."""
        return self._policy

    async def call(
        self,
        credentials: Credentials,
        endpoint: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: bytes | str | None = None,
        json_body: Any = None,
        files: FilesArg | None = None,
        retries: int | None = None,
    ) -> Any:
        """Perform a Jira request.

        Args:
            credentials: Base URL and bearer token.
            endpoint: Path and query appended to the base URL.
            method: HTTP method.
            headers: Extra headers; may override defaults but never
                Authorization.
            body: Raw request body.
            json_body: Value serialized as the JSON request body.
            files: Multipart files as name -> (filename, content).
            retries: Retry budget, defaults to the policy's max_retries.
                Negative values are treated as zero.

        Returns:
            Parsed JSON, or None for 204 and empty responses.

        Raises:
            JiraRequestError: On any terminal failure.
        """
        budget = self._policy.max_retries if retries is None else max(retries, 0)
        url = f"{credentials.base_url}{endpoint}"
        log = self._log.bind(method=method, endpoint=endpoint)

        for attempt in range(1, budget + 2):
            try:
                response = await self._execute_single(
                    credentials=credentials,
                    url=url,
                    method=method,
                    extra_headers=headers,
                    body=body,
                    json_body=json_body,
                    files=files,
                    log=log.bind(attempt=attempt),
                )
                if response.status_code == HTTP_STATUS_NO_CONTENT:
                    return None
                if HTTP_STATUS_OK_MIN <= response.status_code < HTTP_STATUS_OK_MAX:
                    return self._parse_body(response)
            except JiraRequestError as e:
                self._fail(e, log)

            classification = classify_status(
                response.status_code, response.reason_phrase
            )
            message = enrich_message(classification.message, response.content)
            last_error = JiraRequestError(
                message,
                status=classification.status_code,
                error_class=classification.error_class,
            )

            if not self._policy.should_retry(
                classification.retryable, attempt, budget
            ):
                break

            delay_ms = self._policy.get_delay_ms(attempt)
            self._metrics.record_retry()
            log.warning(
                "retry_attempt",
                status_code=response.status_code,
                attempt=attempt,
                delay_ms=delay_ms,
                retries_left=budget - attempt,
            )
            await self._sleep(delay_ms)

        # Not retryable, or retry budget exhausted
        self._fail(last_error, log)

    def _fail(
        self,
        error: JiraRequestError,
        log: structlog.stdlib.BoundLogger,
    ) -> NoReturn:
        """Record and raise a terminal failure."""
        self._metrics.record_failure(error.error_class)
        log.error("request_failed", **error.to_dict())
        raise error

    def _build_headers(
        self,
        credentials: Credentials,
        extra_headers: Mapping[str, str] | None,
        multipart: bool,
    ) -> dict[str, str]:
        """Build request headers.

        Args:
            credentials: Source of the bearer token.
            extra_headers: Caller-provided headers.
            multipart: Whether the body is multipart form data.

        Returns:
            Complete headers dictionary.
        """
        headers: dict[str, str] = {"User-Agent": USER_AGENT}
        if not multipart:
            headers["Content-Type"] = "application/json"

        if extra_headers:
            overridden = {key.lower() for key in extra_headers}
            headers = {k: v for k, v in headers.items() if k.lower() not in overridden}
            headers.update(
                {k: v for k, v in extra_headers.items() if k.lower() != "authorization"}
            )

        headers["Authorization"] = f"Bearer {credentials.bearer_token}"
        return headers

    async def _execute_single(
        self,
        credentials: Credentials,
        url: str,
        method: str,
        extra_headers: Mapping[str, str] | None,
        body: bytes | str | None,
        json_body: Any,
        files: FilesArg | None,
        log: structlog.stdlib.BoundLogger,
    ) -> httpx.Response:
        """Execute a single HTTP attempt within the wall-clock timeout.

        Headers and body are rebuilt on every attempt.

        Raises:
            JiraRequestError: On timeout or transport failure.
        """
        headers = self._build_headers(credentials, extra_headers, files is not None)
        content = json.dumps(json_body) if json_body is not None else body
        timeout = self._policy.timeout_seconds

        log.debug(
            "request_start",
            headers=redact_headers(headers),
            body_bytes=len(content) if content else 0,
        )
        start_ns = time.perf_counter_ns()

        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=timeout,
                follow_redirects=True,
            ) as client:
                response = await asyncio.wait_for(
                    client.request(
                        method,
                        url,
                        headers=headers,
                        content=content,
                        files=dict(files) if files is not None else None,
                    ),
                    timeout=timeout,
                )
        except (TimeoutError, httpx.TimeoutException) as e:
            msg = f"Request timeout: The request took longer than {timeout:g} seconds"
            raise JiraRequestError(msg, error_class=ErrorClass.TIMEOUT) from e
        except httpx.TransportError as e:
            msg = f"Connection failed: {e}"
            raise JiraRequestError(msg, error_class=ErrorClass.CONNECTION_ERROR) from e

        duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
        self._metrics.record_request(response.status_code, duration_ms)
        log.debug(
            "request_complete",
            status_code=response.status_code,
            bytes=len(response.content),
            duration_ms=round(duration_ms, 2),
        )
        return response

    def _parse_body(self, response: httpx.Response) -> Any:
        """Parse a successful response body as JSON.

        Raises:
            JiraRequestError: If the body is not valid JSON.
        """
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            msg = f"Failed to parse Jira response: {e}"
            raise JiraRequestError(msg, error_class=ErrorClass.BODY_PARSE) from e
