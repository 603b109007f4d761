"""Data models for the Jira request layer."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jira_bearer.fetch.constants import (
    MAX_RETRIES,
    REQUEST_TIMEOUT_SECONDS,
    RETRY_DELAY_BASE_MS,
)


class ErrorClass(str, Enum):
    """Classification of request failures.

    - TIMEOUT: Attempt exceeded the wall-clock budget
    - AUTHENTICATION: 401, token invalid or expired
    - AUTHORIZATION: 403, token lacks access
    - NOT_FOUND: 404
    - RATE_LIMITED: 429
    - SERVER_ERROR: 500
    - GATEWAY_TRANSIENT: 502/503/504, retried
    - BODY_PARSE: Successful response body was not valid JSON
    - CONNECTION_ERROR: Transport failure before any response
    - UNCLASSIFIED: Any other non-success status
    """

    TIMEOUT = "TIMEOUT"
    AUTHENTICATION = "AUTHENTICATION"
    AUTHORIZATION = "AUTHORIZATION"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    SERVER_ERROR = "SERVER_ERROR"
    GATEWAY_TRANSIENT = "GATEWAY_TRANSIENT"
    BODY_PARSE = "BODY_PARSE"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    UNCLASSIFIED = "UNCLASSIFIED"


class StatusRule(BaseModel):
    """Classification entry for one HTTP status code.

    The message may contain a ``{status}`` placeholder.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    error_class: ErrorClass
    message: Annotated[str, Field(min_length=1)]
    retryable: bool = False

    def render(self, status_code: int) -> str:
        """Render the user-facing message for a status code."""
        return self.message.format(status=status_code)


class Classification(BaseModel):
    """Outcome of classifying a failed response."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    error_class: ErrorClass
    message: Annotated[str, Field(min_length=1)]
    status_code: int
    retryable: bool


class JiraRequestError(Exception):
    """Terminal failure of a Jira request.

    ``status`` is set when the failure was derived from an HTTP response
    and is None for timeouts, connection failures and body parse failures.
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        error_class: ErrorClass = ErrorClass.UNCLASSIFIED,
    ) -> None:
        """Initialize the request error.

        Args:
            message: Human-readable error message.
            status: HTTP status code, if any.
            error_class: Classification of the failure.
        """
        super().__init__(message)
        self.message = message
        self.status = status
        self.error_class = error_class

    def to_dict(self) -> dict[str, str | int | None]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_class": self.error_class.value,
            "message": self.message,
            "status": self.status,
        }


class RequestPolicy(BaseModel):
    """Timeout and retry settings for the request executor.

    Uses linear backoff: the delay before attempt n+1 is
    base_delay_ms * n. Defaults are the fixed process-wide tunables.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    timeout_seconds: Annotated[float, Field(gt=0.0, le=300.0)] = (
        REQUEST_TIMEOUT_SECONDS
    )
    max_retries: Annotated[int, Field(ge=0, le=10)] = MAX_RETRIES
    base_delay_ms: Annotated[int, Field(ge=0, le=60000)] = RETRY_DELAY_BASE_MS

    @property
    def max_attempts(self) -> int:
        """Total attempts allowed, including the first."""
        return self.max_retries + 1

    def should_retry(self, retryable: bool, attempt: int, retries: int) -> bool:
        """Determine if a failed attempt should be retried.

        Args:
            retryable: Whether the failure classification is retryable.
            attempt: Number of the attempt that failed (1-indexed).
            retries: Retry budget for this call.

        Returns:
            True if another attempt should be made.
        """
        return retryable and attempt <= retries

    def get_delay_ms(self, attempt: int) -> int:
        """Calculate the delay after a failed attempt.

        Args:
            attempt: Number of the attempt that failed (1-indexed).

        Returns:
            Delay in milliseconds.
        """
        return self.base_delay_ms * attempt


class Credentials(BaseModel):
    """Jira base URL and bearer token.

    Immutable for the life of the process and passed into every request.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: Annotated[str, Field(min_length=1, pattern=r"^https?://")]
    bearer_token: Annotated[str, Field(min_length=1, repr=False)]

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Remove trailing slashes so endpoints can be appended directly."""
        return v.rstrip("/")
