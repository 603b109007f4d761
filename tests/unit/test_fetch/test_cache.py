"""Unit tests for the metadata TTL cache."""

import asyncio
from typing import Any

import pytest

from jira_bearer.fetch.cache import TTLCache
from jira_bearer.fetch.metrics import RequestMetrics
from tests.helpers.jira import FakeClock


@pytest.fixture(autouse=True)
def reset_metrics() -> None:
    """Start every test with fresh counters."""
    RequestMetrics.reset()


class CountingProducer:
    """Producer returning an incrementing value per call."""

    def __init__(self) -> None:
        self.calls = 0

    async def __call__(self) -> dict[str, Any]:
        self.calls += 1
        return {"version": self.calls}


class FailingProducer:
    """Producer that always raises."""

    def __init__(self) -> None:
        self.calls = 0

    async def __call__(self) -> Any:
        self.calls += 1
        raise RuntimeError("fetch failed")


@pytest.mark.unit
class TestGetOrFetch:
    """Tests for TTLCache.get_or_fetch."""

    @pytest.fixture
    def clock(self) -> FakeClock:
        """Create a controllable clock."""
        return FakeClock()

    @pytest.fixture
    def cache(self, clock: FakeClock) -> TTLCache:
        """Create a cache with a 300 second TTL."""
        return TTLCache(ttl_seconds=300.0, clock=clock)

    def test_fresh_entry_is_reused(self, cache: TTLCache, clock: FakeClock) -> None:
        """Test that repeated reads within the TTL fetch once."""
        producer = CountingProducer()

        first = asyncio.run(cache.get_or_fetch("statuses", producer))
        clock.advance(299.0)
        second = asyncio.run(cache.get_or_fetch("statuses", producer))

        assert first == second == {"version": 1}
        assert producer.calls == 1

    def test_stale_entry_is_refreshed(self, cache: TTLCache, clock: FakeClock) -> None:
        """Test that an entry exactly TTL old is refetched."""
        producer = CountingProducer()

        asyncio.run(cache.get_or_fetch("statuses", producer))
        clock.advance(300.0)
        refreshed = asyncio.run(cache.get_or_fetch("statuses", producer))

        assert refreshed == {"version": 2}
        assert producer.calls == 2

    def test_refresh_resets_timestamp(self, cache: TTLCache, clock: FakeClock) -> None:
        """Test that a refreshed entry is fresh for another full TTL."""
        producer = CountingProducer()

        asyncio.run(cache.get_or_fetch("k", producer))
        clock.advance(301.0)
        asyncio.run(cache.get_or_fetch("k", producer))
        clock.advance(100.0)
        value = asyncio.run(cache.get_or_fetch("k", producer))

        assert value == {"version": 2}
        assert producer.calls == 2

    def test_keys_are_independent(self, cache: TTLCache) -> None:
        """Test that each key caches its own value."""
        producer = CountingProducer()

        asyncio.run(cache.get_or_fetch("issue-types", producer))
        asyncio.run(cache.get_or_fetch("statuses", producer))

        assert producer.calls == 2
        assert len(cache) == 2
        assert "issue-types" in cache

    def test_failure_is_not_cached(self, cache: TTLCache) -> None:
        """Test that producer errors propagate and write nothing."""
        failing = FailingProducer()

        with pytest.raises(RuntimeError, match="fetch failed"):
            asyncio.run(cache.get_or_fetch("fields", failing))
        with pytest.raises(RuntimeError):
            asyncio.run(cache.get_or_fetch("fields", failing))

        assert failing.calls == 2
        assert "fields" not in cache

    def test_failed_refresh_keeps_previous_entry(
        self, cache: TTLCache, clock: FakeClock
    ) -> None:
        """Test that a failed refresh leaves the stale entry in place."""
        asyncio.run(cache.get_or_fetch("k", CountingProducer()))
        clock.advance(400.0)

        with pytest.raises(RuntimeError):
            asyncio.run(cache.get_or_fetch("k", FailingProducer()))

        assert "k" in cache

    def test_ttl_override(self, cache: TTLCache, clock: FakeClock) -> None:
        """Test that a per-call TTL replaces the default."""
        producer = CountingProducer()

        asyncio.run(cache.get_or_fetch("k", producer, ttl_seconds=10.0))
        clock.advance(11.0)
        asyncio.run(cache.get_or_fetch("k", producer, ttl_seconds=10.0))

        assert producer.calls == 2

    def test_records_hits_and_misses(self, cache: TTLCache) -> None:
        """Test that cache lookups are counted."""
        producer = CountingProducer()

        asyncio.run(cache.get_or_fetch("k", producer))
        asyncio.run(cache.get_or_fetch("k", producer))
        asyncio.run(cache.get_or_fetch("k", producer))

        metrics = RequestMetrics.get_instance()
        assert metrics.cache_misses_total == 1
        assert metrics.cache_hits_total == 2


@pytest.mark.unit
class TestDefaults:
    """Tests for cache defaults."""

    def test_default_ttl_is_five_minutes(self) -> None:
        """Test the default time-to-live."""
        assert TTLCache().ttl_seconds == 300.0

    def test_instances_do_not_share_entries(self) -> None:
        """Test that caches are independent instances."""
        first, second = TTLCache(), TTLCache()

        asyncio.run(first.get_or_fetch("k", CountingProducer()))

        assert "k" in first
        assert "k" not in second
