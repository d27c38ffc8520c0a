"""
Thread-safe observation cache with bounded size and TTL.

Weather observations are keyed by coordinate rounded to a fixed number of
decimals, so nearby lookups within the TTL reuse one fetch.
- Bounds memory usage with configurable max entries
- Uses LRU eviction when cache is full
- Expires entries after a time-to-live
- Is thread-safe for concurrent fetches
"""
import threading
import logging
from typing import Any, Callable, Dict, Hashable, Optional, Tuple
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from collections import OrderedDict

from tempest.routes.route import Coordinate

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 600
KEY_PRECISION = 2


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def coordinate_key(coordinate: Coordinate, precision: int = KEY_PRECISION) -> Tuple[float, float]:
    """Cache key for a coordinate: lat/lon rounded to `precision` decimals."""
    return (round(coordinate.lat, precision), round(coordinate.lon, precision))


@dataclass
class CacheEntry:
    """Single cache entry with its fetch time."""
    value: Any
    fetched_at: datetime
    expires_at: Optional[datetime]
    access_count: int = 0


class ObservationCache:
    """
    Thread-safe LRU cache with bounded size and TTL support.

    Usage:
        cache = ObservationCache(max_size=500, ttl_seconds=600)
        cache.set(coordinate_key(coord), observation)
        observation = cache.get(coordinate_key(coord))
    """

    def __init__(
        self,
        max_size: int = 500,
        ttl_seconds: Optional[int] = DEFAULT_TTL_SECONDS,
        name: str = "weather",
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Initialize cache.

        Args:
            max_size: Maximum number of entries before LRU eviction
            ttl_seconds: Entry lifetime (None = no expiration)
            name: Cache name for logging/stats
            clock: Source of the current time (injectable for tests)
        """
        if max_size < 1:
            raise ValueError("Cache max_size must be at least 1")
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self.name = name
        self._clock = clock

        self._cache: "OrderedDict[Hashable, CacheEntry]" = OrderedDict()
        self._lock = threading.RLock()

        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

    def _expired(self, entry: CacheEntry, now: datetime) -> bool:
        return entry.expires_at is not None and now >= entry.expires_at

    def get(self, key: Hashable) -> Optional[Any]:
        """
        Get value from cache.

        Returns:
            Cached value or None if not found/expired
        """
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return None

            if self._expired(entry, self._clock()):
                del self._cache[key]
                self._expirations += 1
                self._misses += 1
                logger.debug(f"Cache '{self.name}' expired: {key}")
                return None

            entry.access_count += 1
            self._cache.move_to_end(key)
            self._hits += 1
            return entry.value

    def set(self, key: Hashable, value: Any) -> None:
        """Store a value, evicting the least recently used entry when full."""
        with self._lock:
            now = self._clock()
            expires_at = now + timedelta(seconds=self.ttl_seconds) if self.ttl_seconds else None
            entry = CacheEntry(value=value, fetched_at=now, expires_at=expires_at)

            if key in self._cache:
                self._cache[key] = entry
                self._cache.move_to_end(key)
                return

            while len(self._cache) >= self.max_size:
                oldest_key, _ = self._cache.popitem(last=False)
                self._evictions += 1
                logger.debug(f"Cache '{self.name}' evicted: {oldest_key}")

            self._cache[key] = entry

    def clear(self) -> int:
        """Clear all entries. Returns the number removed."""
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
            logger.info(f"Cache '{self.name}' cleared: {count} entries removed")
            return count

    def cleanup_expired(self) -> int:
        """Remove all expired entries. Returns the number removed."""
        with self._lock:
            now = self._clock()
            expired_keys = [k for k, e in self._cache.items() if self._expired(e, now)]
            for key in expired_keys:
                del self._cache[key]
                self._expirations += 1
            return len(expired_keys)

    def get_stats(self) -> Dict[str, Any]:
        """Cache metrics for health reporting."""
        with self._lock:
            total_requests = self._hits + self._misses
            hit_rate = self._hits / total_requests if total_requests > 0 else 0.0
            return {
                'name': self.name,
                'size': len(self._cache),
                'max_size': self.max_size,
                'hits': self._hits,
                'misses': self._misses,
                'hit_rate': round(hit_rate, 4),
                'evictions': self._evictions,
                'expirations': self._expirations,
                'ttl_seconds': self.ttl_seconds,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __contains__(self, key: Hashable) -> bool:
        """Check presence without touching LRU order or stats."""
        with self._lock:
            entry = self._cache.get(key)
            return entry is not None and not self._expired(entry, self._clock())
