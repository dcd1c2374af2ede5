"""
Result caching for videodigest.
"""

from videodigest.cache.results import (
    CacheKey,
    ResultCache,
    ResultStore,
    make_cache_key,
)

__all__ = [
    "CacheKey",
    "ResultCache",
    "ResultStore",
    "make_cache_key",
]
