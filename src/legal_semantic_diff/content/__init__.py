"""Version content fetching and caching."""

from .cache import VersionContentCache
from .fetcher import CachedContentFetcher, cache_key
from .file_fetcher import LocalFileContentFetcher

__all__ = [
    "VersionContentCache",
    "CachedContentFetcher",
    "cache_key",
    "LocalFileContentFetcher",
]
