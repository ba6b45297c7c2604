"""
Two-tier caching.

- redis_client.py: Redis connection pooling (distributed tier)
- backends.py: LocalCacheBackend and RedisCacheBackend behind one protocol
- tier_selector.py: one-time health-checked choice between the tiers
- fetcher.py: cache-aside wrapper keyed by operation name + parameters

Storage Strategy:
- Values stored as JSON text, decoded through a pydantic TypeAdapter per region
- Redis entries are hashes keyed ``<prefix><region>::<operation>:<params>``
- No expiry unless CACHE_TTL_SECONDS is set
"""

from content_gateway.cache.backends import (
    CacheBackend,
    CacheEntry,
    CacheTier,
    LocalCacheBackend,
    RedisCacheBackend,
)
from content_gateway.cache.exceptions import CacheUnavailable
from content_gateway.cache.fetcher import CacheAsideFetcher, make_cache_key
from content_gateway.cache.redis_client import RedisClient
from content_gateway.cache.tier_selector import CacheTierSelector, ProbeResult, TierState

__all__ = [
    "CacheAsideFetcher",
    "CacheBackend",
    "CacheEntry",
    "CacheTier",
    "CacheTierSelector",
    "CacheUnavailable",
    "LocalCacheBackend",
    "ProbeResult",
    "RedisCacheBackend",
    "RedisClient",
    "TierState",
    "make_cache_key",
]
