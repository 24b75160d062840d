"""Caching decorator around a version content fetcher."""

import logging
from typing import Optional

from ..interfaces.fetcher import IContentFetcher
from .cache import VersionContentCache

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "version_content:"


def cache_key(version_id: str) -> str:
    """Cache key of a version's content."""
    return f"{CACHE_KEY_PREFIX}{version_id}"


class CachedContentFetcher(IContentFetcher):
    """
    Serves version content from a cache, delegating misses to a fetcher.

    Only non-empty content is cached. Fetch errors propagate unchanged.
    """

    def __init__(self, fetcher: IContentFetcher, cache: Optional[VersionContentCache] = None):
        """
        Initialize the cached fetcher.

        Args:
            fetcher: Fetcher used on cache misses.
            cache: Cache instance (a default one is created if not provided).
        """
        self._fetcher = fetcher
        self._cache = cache or VersionContentCache()

    @property
    def cache(self) -> VersionContentCache:
        return self._cache

    def fetch_version_content(self, version_id: str, document_id: str) -> str:
        key = cache_key(version_id)
        cached = self._cache.get(key)
        if cached is not None:
            logger.info(f"Content cache hit for version {version_id}")
            return cached

        content = self._fetcher.fetch_version_content(version_id, document_id)
        if content:
            self._cache.set(key, content)
        return content
