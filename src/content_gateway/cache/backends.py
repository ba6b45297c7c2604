"""
Cache backends for the two cache tiers.

- LocalCacheBackend: in-process, non-shared dict per region (fallback tier)
- RedisCacheBackend: Redis hashes keyed ``<prefix><region>::<key>`` (distributed tier)

Both store serialized JSON text; decoding into typed values is the fetcher's job.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Protocol

import structlog
from redis.asyncio import Redis as AsyncRedis
from redis.exceptions import RedisError

from content_gateway.cache.exceptions import CacheUnavailable

logger = structlog.get_logger(__name__)


class CacheTier(str, Enum):
    """Tier that holds a cache entry."""

    DISTRIBUTED = "distributed"
    LOCAL = "local"


@dataclass(frozen=True)
class CacheEntry:
    """
    One cached value plus insertion metadata.

    Attributes:
        key: Cache key, unique within its region
        value: Serialized JSON text
        tier: Tier currently holding the entry
        inserted_at: UTC insertion time (None if the backend did not record it)
    """

    key: str
    value: str
    tier: CacheTier
    inserted_at: Optional[datetime] = None


class CacheBackend(Protocol):
    """Protocol shared by both tiers."""

    tier: CacheTier

    async def get(self, region: str, key: str) -> Optional[CacheEntry]:
        ...

    async def set(self, region: str, key: str, value: str) -> CacheEntry:
        ...

    async def delete(self, region: str, key: str) -> bool:
        ...

    async def clear(self, region: str) -> int:
        ...

    async def ping(self) -> bool:
        ...


class LocalCacheBackend:
    """
    In-process cache: one dict per region.

    Writes are last-write-wins. Every coroutine runs on the same event loop,
    so plain dict operations need no extra locking.
    """

    tier = CacheTier.LOCAL

    def __init__(self):
        self._regions: dict[str, dict[str, CacheEntry]] = {}

    async def get(self, region: str, key: str) -> Optional[CacheEntry]:
        return self._regions.get(region, {}).get(key)

    async def set(self, region: str, key: str, value: str) -> CacheEntry:
        entry = CacheEntry(
            key=key,
            value=value,
            tier=self.tier,
            inserted_at=datetime.now(timezone.utc),
        )
        self._regions.setdefault(region, {})[key] = entry
        return entry

    async def delete(self, region: str, key: str) -> bool:
        return self._regions.get(region, {}).pop(key, None) is not None

    async def clear(self, region: str) -> int:
        return len(self._regions.pop(region, {}))

    async def ping(self) -> bool:
        return True

    def size(self, region: str) -> int:
        """Number of entries currently held in a region."""
        return len(self._regions.get(region, {}))


class RedisCacheBackend:
    """
    Redis-backed cache tier.

    Each entry is a hash with ``value`` and ``inserted_at`` fields. No expiry
    is set unless ``ttl_seconds`` is configured. Every Redis failure is
    raised as CacheUnavailable.
    """

    tier = CacheTier.DISTRIBUTED

    def __init__(self, redis: AsyncRedis, key_prefix: str = "", ttl_seconds: Optional[int] = None):
        self.redis = redis
        self.key_prefix = key_prefix
        self.ttl_seconds = ttl_seconds

    def _full_key(self, region: str, key: str) -> str:
        return f"{self.key_prefix}{region}::{key}"

    async def get(self, region: str, key: str) -> Optional[CacheEntry]:
        try:
            data = await self.redis.hgetall(self._full_key(region, key))
        except (RedisError, OSError) as e:
            raise CacheUnavailable(
                f"Redis GET failed: {e}", details={"region": region, "key": key}
            ) from e

        if not data or "value" not in data:
            return None

        inserted_at = data.get("inserted_at")
        return CacheEntry(
            key=key,
            value=data["value"],
            tier=self.tier,
            inserted_at=datetime.fromisoformat(inserted_at) if inserted_at else None,
        )

    async def set(self, region: str, key: str, value: str) -> CacheEntry:
        full_key = self._full_key(region, key)
        inserted_at = datetime.now(timezone.utc)
        try:
            await self.redis.hset(
                full_key,
                mapping={"value": value, "inserted_at": inserted_at.isoformat()},
            )
            if self.ttl_seconds:
                await self.redis.expire(full_key, self.ttl_seconds)
        except (RedisError, OSError) as e:
            raise CacheUnavailable(
                f"Redis SET failed: {e}", details={"region": region, "key": key}
            ) from e

        return CacheEntry(key=key, value=value, tier=self.tier, inserted_at=inserted_at)

    async def delete(self, region: str, key: str) -> bool:
        try:
            return bool(await self.redis.delete(self._full_key(region, key)))
        except (RedisError, OSError) as e:
            raise CacheUnavailable(f"Redis DELETE failed: {e}", details={"region": region}) from e

    async def clear(self, region: str) -> int:
        pattern = f"{self.key_prefix}{region}::*"
        deleted = 0
        try:
            async for full_key in self.redis.scan_iter(match=pattern):
                deleted += await self.redis.delete(full_key)
        except (RedisError, OSError) as e:
            raise CacheUnavailable(f"Redis SCAN failed: {e}", details={"region": region}) from e

        logger.info("Cleared Redis cache region", region=region, deleted=deleted)
        return deleted

    async def ping(self) -> bool:
        """Liveness check. Raises on connection failure (probe handles it)."""
        return bool(await self.redis.ping())
