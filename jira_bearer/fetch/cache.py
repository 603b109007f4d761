"""TTL cache for slowly-changing Jira metadata.

Wraps an arbitrary async fetch. Staleness is evaluated lazily at read
time; entries are superseded by fresh fetches and never evicted.
"""

import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import structlog

from jira_bearer.fetch.constants import CACHE_TTL_SECONDS
from jira_bearer.fetch.metrics import RequestMetrics


logger = structlog.get_logger()

Producer = Callable[[], Awaitable[Any]]


@dataclass(frozen=True)
class CacheEntry:
    """A cached value and the time it was stored."""

    value: Any
    timestamp: float


class TTLCache:
    """Key to value map with per-read freshness checks.

    Concurrent misses on the same key are not de-duplicated: each caller
    runs the producer and the last write to complete wins. Keys are
    caller-defined; the cache has no bound on their number.
    """

    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl_seconds: Default time-to-live for entries.
            clock: Monotonic time source in seconds.
        """
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._metrics = RequestMetrics.get_instance()
        self._log = logger.bind(component="cache")

    @property
    def ttl_seconds(self) -> float:
        """Default time-to-live for entries."""
        return self._ttl_seconds

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def _is_fresh(self, entry: CacheEntry, ttl_seconds: float) -> bool:
        return self._clock() - entry.timestamp < ttl_seconds

    async def get_or_fetch(
        self,
        key: str,
        producer: Producer,
        ttl_seconds: float | None = None,
    ) -> Any:
        """Return the cached value for key, fetching it when missing or stale.

        Args:
            key: Cache key.
            producer: Zero-argument coroutine function performing the fetch.
            ttl_seconds: Override of the default time-to-live.

        Returns:
            The cached or freshly fetched value.

        Raises:
            Whatever the producer raises. No entry is written on failure.
        """
        ttl = self._ttl_seconds if ttl_seconds is None else ttl_seconds

        entry = self._entries.get(key)
        if entry is not None and self._is_fresh(entry, ttl):
            self._metrics.record_cache_hit()
            self._log.debug("cache_hit", key=key)
            return entry.value

        self._metrics.record_cache_miss()
        self._log.debug("cache_miss", key=key, stale=entry is not None)

        value = await producer()
        self._entries[key] = CacheEntry(value=value, timestamp=self._clock())
        return value
