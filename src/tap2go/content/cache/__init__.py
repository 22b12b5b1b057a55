"""
Two-tier content cache.

A distributed Redis tier backed by an in-process cachetools tier, with a
fixed TTL per content category and prefix-based bulk invalidation.
"""

from tap2go.content.cache.backends import (
    CacheEntry,
    LocalCacheTier,
    RedisCacheTier,
    glob_to_regex,
)
from tap2go.content.cache.config import CacheKeys, CachePrefix, CacheTTL, ContentCategory
from tap2go.content.cache.invalidation import CacheInvalidator, InvalidationTarget
from tap2go.content.cache.manager import CacheManager, CacheStats

__all__ = [
    "CacheEntry",
    "CacheInvalidator",
    "CacheKeys",
    "CacheManager",
    "CachePrefix",
    "CacheStats",
    "CacheTTL",
    "ContentCategory",
    "InvalidationTarget",
    "LocalCacheTier",
    "RedisCacheTier",
    "glob_to_regex",
]
