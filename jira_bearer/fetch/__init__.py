"""Jira request layer with retries, timeouts, and a metadata cache.

This module provides:
- Authenticated requests with a wall-clock timeout per attempt
- Linear backoff retries for gateway failures (502/503/504)
- Status classification with best-effort error detail enrichment
- A TTL cache for slowly-changing metadata
- Header redaction and metrics for observability
"""

from jira_bearer.fetch.cache import CacheEntry, TTLCache
from jira_bearer.fetch.classify import (
    RETRYABLE_STATUSES,
    STATUS_RULES,
    classify_status,
    enrich_message,
    extract_error_details,
)
from jira_bearer.fetch.client import RequestExecutor, sleep_ms
from jira_bearer.fetch.constants import (
    CACHE_TTL_SECONDS,
    MAX_RETRIES,
    REQUEST_TIMEOUT_SECONDS,
    RETRY_DELAY_BASE_MS,
)
from jira_bearer.fetch.metrics import RequestMetrics
from jira_bearer.fetch.models import (
    Classification,
    Credentials,
    ErrorClass,
    JiraRequestError,
    RequestPolicy,
    StatusRule,
)
from jira_bearer.fetch.redact import redact_headers


__all__ = [
    # Executor
    "RequestExecutor",
    "sleep_ms",
    # Cache
    "TTLCache",
    "CacheEntry",
    # Classification
    "STATUS_RULES",
    "RETRYABLE_STATUSES",
    "classify_status",
    "enrich_message",
    "extract_error_details",
    # Models
    "Credentials",
    "Classification",
    "ErrorClass",
    "JiraRequestError",
    "RequestPolicy",
    "StatusRule",
    # Constants
    "REQUEST_TIMEOUT_SECONDS",
    "CACHE_TTL_SECONDS",
    "MAX_RETRIES",
    "RETRY_DELAY_BASE_MS",
    # Metrics
    "RequestMetrics",
    # Redaction
    "redact_headers",
]
