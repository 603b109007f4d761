"""Metrics collection for Jira requests and the metadata cache."""

from dataclasses import dataclass, field
from typing import ClassVar

from jira_bearer.fetch.models import ErrorClass


@dataclass
class RequestMetrics:
    """Counters for Jira request operations.

    Singleton shared by the executor and the cache. Diagnostic only.
    """

    http_requests_total: dict[int, int] = field(default_factory=dict)
    http_retry_total: int = 0
    http_failures_total: dict[str, int] = field(default_factory=dict)
    http_duration_ms_total: float = 0.0
    http_request_count: int = 0
    cache_hits_total: int = 0
    cache_misses_total: int = 0

    _instance: ClassVar["RequestMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "RequestMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_request(self, status_code: int, duration_ms: float) -> None:
        """Record one physical HTTP attempt that produced a response.

        Args:
            status_code: HTTP status code.
            duration_ms: Attempt duration in milliseconds.
        """
        self.http_requests_total[status_code] = (
            self.http_requests_total.get(status_code, 0) + 1
        )
        self.http_duration_ms_total += duration_ms
        self.http_request_count += 1

    def record_retry(self) -> None:
        """Record a retry attempt."""
        self.http_retry_total += 1

    def record_failure(self, error_class: ErrorClass) -> None:
        """Record a terminal failure.

        Args:
            error_class: Classification of the failure.
        """
        key = error_class.value
        self.http_failures_total[key] = self.http_failures_total.get(key, 0) + 1

    def record_cache_hit(self) -> None:
        """Record a cache hit."""
        self.cache_hits_total += 1

    def record_cache_miss(self) -> None:
        """Record a cache miss."""
        self.cache_misses_total += 1

    def to_dict(self) -> dict[str, int | float | dict[str, int] | dict[int, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "http_requests_total": dict(self.http_requests_total),
            "http_retry_total": self.http_retry_total,
            "http_failures_total": dict(self.http_failures_total),
            "http_duration_ms_total": self.http_duration_ms_total,
            "http_request_count": self.http_request_count,
            "cache_hits_total": self.cache_hits_total,
            "cache_misses_total": self.cache_misses_total,
        }

    @property
    def avg_duration_ms(self) -> float:
        """Average attempt duration in milliseconds."""
        if self.http_request_count == 0:
            return 0.0
        return self.http_duration_ms_total / self.http_request_count
