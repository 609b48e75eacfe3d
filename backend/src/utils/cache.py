"""
Process-wide Metadata Cache
===========================

A thread-safe in-memory cache for table schemas.

Features:
- No expiry: entries live for the lifetime of the process
- Thread-safe reads and writes
- Compute-on-miss without holding the lock

A schema change requires a process restart. Two threads missing on the same
table both compute the entry; the values are identical, so the second write
is harmless.

Usage:
    from utils.cache import get_metadata_cache

    cache = get_metadata_cache()
    schema = cache.get_or_compute("products", lambda: load_schema("products"))
"""

from threading import Lock
from typing import Any, Callable, Dict, Optional, TypeVar

T = TypeVar('T')


class MetadataCache:
    """
    Thread-safe in-memory cache keyed by table name.

    Attributes:
        _cache: Dictionary storing cached values
        _lock: Threading lock for thread safety
        _misses: Number of computations performed
    """

    def __init__(self):
        self._cache: Dict[str, Any] = {}
        self._lock = Lock()
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value or None."""
        with self._lock:
            return self._cache.get(key)

    def set(self, key: str, value: Any) -> None:
        """Store a value."""
        with self._lock:
            self._cache[key] = value

    def get_or_compute(self, key: str, compute_fn: Callable[[], T]) -> T:
        """
        Get cached value or compute and cache new value.

        The computation runs outside the lock so a slow catalog query does not
        block readers of other tables. Exceptions from compute_fn propagate and
        nothing is cached.

        Args:
            key: Cache key
            compute_fn: Function to compute value if not cached

        Returns:
            Cached or computed value
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        result = compute_fn()

        with self._lock:
            self._misses += 1
            self._cache[key] = result

        return result

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._cache

    def clear(self) -> None:
        """Drop every entry (tests only; production has no invalidation)."""
        with self._lock:
            self._cache.clear()
            self._misses = 0

    def get_stats(self) -> Dict[str, Any]:
        """
        Get cache statistics for monitoring.

        Returns:
            Dictionary with cache stats
        """
        with self._lock:
            return {
                "total_entries": len(self._cache),
                "tables": sorted(self._cache),
                "misses": self._misses
            }


_metadata_cache: Optional[MetadataCache] = None
_cache_lock = Lock()


def get_metadata_cache() -> MetadataCache:
    """
    Get the global metadata cache singleton.

    Thread-safe lazy initialization ensures only one cache instance exists.
    """
    global _metadata_cache
    if _metadata_cache is None:
        with _cache_lock:
            # Double-check locking pattern
            if _metadata_cache is None:
                _metadata_cache = MetadataCache()
    return _metadata_cache
