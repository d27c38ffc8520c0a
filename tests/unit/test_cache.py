"""
Tests for the observation cache.

Time is driven by an injected clock so TTL expiry is deterministic.
"""

from datetime import datetime, timedelta, timezone

import pytest

from tempest.data.cache import ObservationCache, coordinate_key
from tempest.routes import Coordinate


class FakeClock:
    def __init__(self):
        self.now = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


class TestCoordinateKey:

    def test_rounds_to_two_decimals(self):
        assert coordinate_key(Coordinate(12.3456, -45.6789)) == (12.35, -45.68)

    def test_nearby_points_share_key(self):
        assert coordinate_key(Coordinate(10.001, 20.001)) == coordinate_key(Coordinate(10.004, 20.004))


class TestObservationCache:

    def test_get_set(self, clock):
        cache = ObservationCache(clock=clock)
        cache.set("a", 1)
        assert cache.get("a") == 1
        assert cache.get("missing") is None
        assert len(cache) == 1

    def test_ttl_expiry(self, clock):
        cache = ObservationCache(ttl_seconds=600, clock=clock)
        cache.set("a", 1)
        clock.advance(599)
        assert cache.get("a") == 1
        clock.advance(1)
        assert cache.get("a") is None
        assert cache.get_stats()['expirations'] == 1
        assert "a" not in cache

    def test_no_ttl(self, clock):
        cache = ObservationCache(ttl_seconds=None, clock=clock)
        cache.set("a", 1)
        clock.advance(10 ** 7)
        assert cache.get("a") == 1

    def test_lru_eviction(self, clock):
        cache = ObservationCache(max_size=2, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")  # b is now least recently used
        cache.set("c", 3)
        assert "b" not in cache
        assert cache.get("a") == 1
        assert cache.get("c") == 3
        assert cache.get_stats()['evictions'] == 1

    def test_overwrite_refreshes_ttl(self, clock):
        cache = ObservationCache(ttl_seconds=60, clock=clock)
        cache.set("a", 1)
        clock.advance(50)
        cache.set("a", 2)
        clock.advance(50)
        assert cache.get("a") == 2

    def test_cleanup_expired(self, clock):
        cache = ObservationCache(ttl_seconds=60, clock=clock)
        cache.set("a", 1)
        clock.advance(30)
        cache.set("b", 2)
        clock.advance(40)
        assert cache.cleanup_expired() == 1
        assert len(cache) == 1

    def test_stats(self, clock):
        cache = ObservationCache(name="weather", clock=clock)
        cache.set("a", 1)
        cache.get("a")
        cache.get("b")
        stats = cache.get_stats()
        assert stats['name'] == "weather"
        assert stats['hits'] == 1
        assert stats['misses'] == 1
        assert stats['hit_rate'] == 0.5
        assert stats['size'] == 1

    def test_clear(self, clock):
        cache = ObservationCache(clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        assert cache.clear() == 2
        assert len(cache) == 0

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            ObservationCache(max_size=0)
