"""Unit tests for status classification and error enrichment."""

import json

import pytest

from jira_bearer.fetch.classify import (
    RETRYABLE_STATUSES,
    classify_status,
    enrich_message,
    extract_error_details,
)
from jira_bearer.fetch.models import ErrorClass


class TestClassifyStatus:
    """Tests for classify_status."""

    @pytest.mark.parametrize(
        ("status", "error_class"),
        [
            (401, ErrorClass.AUTHENTICATION),
            (403, ErrorClass.AUTHORIZATION),
            (404, ErrorClass.NOT_FOUND),
            (429, ErrorClass.RATE_LIMITED),
            (500, ErrorClass.SERVER_ERROR),
            (502, ErrorClass.GATEWAY_TRANSIENT),
            (503, ErrorClass.GATEWAY_TRANSIENT),
            (504, ErrorClass.GATEWAY_TRANSIENT),
        ],
    )
    def test_known_statuses(self, status: int, error_class: ErrorClass) -> None:
        """Test the class assigned to each recognized status."""
        result = classify_status(status)

        assert result.error_class == error_class
        assert result.status_code == status

    def test_only_gateway_statuses_retry(self) -> None:
        """Test the retryable set."""
        assert frozenset({502, 503, 504}) == RETRYABLE_STATUSES
        assert classify_status(503).retryable is True
        assert classify_status(500).retryable is False
        assert classify_status(429).retryable is False

    def test_server_error_message_includes_status(self) -> None:
        """Test the shared server error message."""
        assert classify_status(502).message == (
            "Jira server error (502). The server may be temporarily unavailable."
        )

    def test_rate_limit_message(self) -> None:
        """Test the rate limit message."""
        assert classify_status(429).message == (
            "Rate limit exceeded. Please wait before making more requests."
        )

    def test_forbidden_message(self) -> None:
        """Test the permission message."""
        assert classify_status(403).message == (
            "Permission denied. Your Bearer token does not have access "
            "to this resource."
        )

    def test_unknown_status(self) -> None:
        """Test the generic message for other statuses."""
        result = classify_status(409, "Conflict")

        assert result.error_class == ErrorClass.UNCLASSIFIED
        assert result.message == "Jira API error: 409 Conflict"
        assert result.retryable is False

    def test_unknown_status_without_reason(self) -> None:
        """Test that a missing reason phrase leaves no trailing space."""
        assert classify_status(499).message == "Jira API error: 499"


class TestExtractErrorDetails:
    """Tests for extract_error_details."""

    def test_error_messages_in_order(self) -> None:
        """Test that errorMessages are joined in order."""
        body = json.dumps({"errorMessages": ["A", "B"]})

        assert extract_error_details(body) == ["Details: A, B"]

    def test_field_errors(self) -> None:
        """Test that field errors follow message details."""
        body = json.dumps(
            {
                "errorMessages": ["Invalid input"],
                "errors": {"summary": "Field required", "priority": "Bad value"},
            }
        ).encode()

        assert extract_error_details(body) == [
            "Details: Invalid input",
            "Field errors: summary: Field required, priority: Bad value",
        ]

    @pytest.mark.parametrize(
        "body",
        [
            None,
            b"",
            b"<html>Bad Gateway</html>",
            b"[1, 2]",
            b'{"errorMessages": []}',
            b'{"errorMessages": "not a list"}',
            b"\xff\xfe",
        ],
    )
    def test_no_details(self, body: bytes | None) -> None:
        """Test that absent or unusable bodies yield nothing."""
        assert extract_error_details(body) == []


class TestEnrichMessage:
    """Tests for enrich_message."""

    def test_appends_details(self) -> None:
        """Test that details are appended on new lines."""
        body = json.dumps({"errorMessages": ["Issue does not exist"]})

        assert enrich_message("Resource not found.", body) == (
            "Resource not found.\nDetails: Issue does not exist"
        )

    def test_unchanged_without_details(self) -> None:
        """Test that a failed enrichment keeps the message."""
        assert enrich_message("Rate limited.", b"oops") == "Rate limited."
