"""In-memory cache for fetched version content."""

import threading
import time
from typing import Dict, Optional, Tuple

DEFAULT_TTL_SECONDS = 3600
DEFAULT_MAX_SIZE = 100


class VersionContentCache:
    """
    Thread-safe in-memory cache of document version texts.

    Version content is immutable once stored, so a live entry is never
    overwritten: ``set`` on an unexpired key is ignored. Expired entries are
    dropped on access and a miss makes the caller refetch.
    """

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE, ttl: int = DEFAULT_TTL_SECONDS):
        """
        Initialize the cache.

        Args:
            max_size: Maximum number of entries.
            ttl: Time-to-live for cache entries in seconds.
        """
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self.ttl = ttl
        self._cache: Dict[str, Tuple[str, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        """
        Get a value from the cache.

        Args:
            key: Cache key.

        Returns:
            Cached content or None if not found or expired.
        """
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            value, timestamp = entry
            if self._is_expired(timestamp):
                del self._cache[key]
                return None
            return value

    def set(self, key: str, value: str) -> bool:
        """
        Store a value unless a live entry already exists.

        Args:
            key: Cache key.
            value: Content to cache.

        Returns:
            True if the value was stored.
        """
        with self._lock:
            entry = self._cache.get(key)
            if entry is not None and not self._is_expired(entry[1]):
                return False

            # Evict oldest entry if cache is full
            if key not in self._cache and len(self._cache) >= self.max_size:
                oldest_key = min(self._cache.keys(), key=lambda k: self._cache[k][1])
                del self._cache[oldest_key]

            self._cache[key] = (value, time.monotonic())
            return True

    def invalidate(self, key: str) -> None:
        """Remove a cache entry if present."""
        with self._lock:
            self._cache.pop(key, None)

    def clear(self) -> None:
        """Clear all cache entries."""
        with self._lock:
            self._cache.clear()

    def size(self) -> int:
        """Get the current cache size."""
        with self._lock:
            return len(self._cache)

    def _is_expired(self, timestamp: float) -> bool:
        return time.monotonic() - timestamp > self.ttl
