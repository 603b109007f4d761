"""Status classification for failed Jira responses.

Classification from the status code is authoritative. Enrichment from
the response body is best effort and never changes the classification.
"""

import json
from typing import Final

from jira_bearer.fetch.constants import (
    HTTP_STATUS_BAD_GATEWAY,
    HTTP_STATUS_FORBIDDEN,
    HTTP_STATUS_GATEWAY_TIMEOUT,
    HTTP_STATUS_INTERNAL_SERVER_ERROR,
    HTTP_STATUS_NOT_FOUND,
    HTTP_STATUS_SERVICE_UNAVAILABLE,
    HTTP_STATUS_TOO_MANY_REQUESTS,
    HTTP_STATUS_UNAUTHORIZED,
)
from jira_bearer.fetch.models import Classification, ErrorClass, StatusRule


_SERVER_ERROR_MESSAGE = (
    "Jira server error ({status}). The server may be temporarily unavailable."
)

STATUS_RULES: Final[dict[int, StatusRule]] = {
    HTTP_STATUS_UNAUTHORIZED: StatusRule(
        error_class=ErrorClass.AUTHENTICATION,
        message="Authentication failed. Your Bearer token is invalid or expired.",
    ),
    HTTP_STATUS_FORBIDDEN: StatusRule(
        error_class=ErrorClass.AUTHORIZATION,
        message=(
            "Permission denied. Your Bearer token does not have access "
            "to this resource."
        ),
    ),
    HTTP_STATUS_NOT_FOUND: StatusRule(
        error_class=ErrorClass.NOT_FOUND,
        message=(
            "Resource not found. Check that the issue key, project key, "
            "or endpoint is correct."
        ),
    ),
    HTTP_STATUS_TOO_MANY_REQUESTS: StatusRule(
        error_class=ErrorClass.RATE_LIMITED,
        message="Rate limit exceeded. Please wait before making more requests.",
    ),
    HTTP_STATUS_INTERNAL_SERVER_ERROR: StatusRule(
        error_class=ErrorClass.SERVER_ERROR,
        message=_SERVER_ERROR_MESSAGE,
    ),
    HTTP_STATUS_BAD_GATEWAY: StatusRule(
        error_class=ErrorClass.GATEWAY_TRANSIENT,
        message=_SERVER_ERROR_MESSAGE,
        retryable=True,
    ),
    HTTP_STATUS_SERVICE_UNAVAILABLE: StatusRule(
        error_class=ErrorClass.GATEWAY_TRANSIENT,
        message=_SERVER_ERROR_MESSAGE,
        retryable=True,
    ),
    HTTP_STATUS_GATEWAY_TIMEOUT: StatusRule(
        error_class=ErrorClass.GATEWAY_TRANSIENT,
        message=_SERVER_ERROR_MESSAGE,
        retryable=True,
    ),
}

RETRYABLE_STATUSES: Final[frozenset[int]] = frozenset(
    code for code, rule in STATUS_RULES.items() if rule.retryable
)


def classify_status(status_code: int, reason_phrase: str = "") -> Classification:
    """Classify a non-success HTTP status.

    Args:
        status_code: HTTP status code.
        reason_phrase: Reason phrase from the response, used for
            unrecognized statuses.

    Returns:
        Classification with message and retryable flag.
    """
    rule = STATUS_RULES.get(status_code)
    if rule is None:
        message = f"Jira API error: {status_code} {reason_phrase}".rstrip()
        return Classification(
            error_class=ErrorClass.UNCLASSIFIED,
            message=message,
            status_code=status_code,
            retryable=False,
        )

    return Classification(
        error_class=rule.error_class,
        message=rule.render(status_code),
        status_code=status_code,
        retryable=rule.retryable,
    )


def extract_error_details(body: bytes | str | None) -> list[str]:
    """Extract error details from a Jira error body.

    Jira reports errors as ``{"errorMessages": [...], "errors": {...}}``.

    Args:
        body: Raw response body.

    Returns:
        Detail lines, empty if the body is absent or unparseable.
    """
    if not body:
        return []

    try:
        payload = json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return []

    if not isinstance(payload, dict):
        return []

    details: list[str] = []

    messages = payload.get("errorMessages")
    if isinstance(messages, list) and messages:
        details.append(f"Details: {', '.join(str(m) for m in messages)}")

    field_errors = payload.get("errors")
    if isinstance(field_errors, dict) and field_errors:
        joined = ", ".join(f"{name}: {msg}" for name, msg in field_errors.items())
        details.append(f"Field errors: {joined}")

    return details


def enrich_message(message: str, body: bytes | str | None) -> str:
    """Append any structured error details from the body to a message.

    Args:
        message: Classified message.
        body: Raw response body.

    Returns:
        The message, with detail lines appended when present.
    """
    details = extract_error_details(body)
    if not details:
        return message
    return "\n".join([message, *details])
