"""
Cache tier selection with health-checked fallback.

State machine:

    UNINITIALIZED -> PROBING_DISTRIBUTED -> DISTRIBUTED_ACTIVE
                                         -> LOCAL_FALLBACK

The decision is made once (at application startup, or lazily on the first
cache access) and is not re-evaluated per request. Leaving LOCAL_FALLBACK
requires an explicit ``reprobe()``. A runtime Redis failure may demote
DISTRIBUTED_ACTIVE to LOCAL_FALLBACK when ``fallback_on_error`` is enabled.

The selector is constructed explicitly and handed to every fetcher, so all
fetchers observe the same tier.
"""

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import structlog

from content_gateway.cache.backends import (
    CacheBackend,
    CacheTier,
    LocalCacheBackend,
    RedisCacheBackend,
)
from content_gateway.cache.exceptions import CacheUnavailable
from content_gateway.cache.redis_client import RedisClient
from content_gateway.config import Settings
from content_gateway.monitoring.metrics import cache_tier

logger = structlog.get_logger(__name__)


class TierState(str, Enum):
    """Lifecycle states of the tier selector."""

    UNINITIALIZED = "uninitialized"
    PROBING_DISTRIBUTED = "probing_distributed"
    DISTRIBUTED_ACTIVE = "distributed_active"
    LOCAL_FALLBACK = "local_fallback"


@dataclass(frozen=True)
class ProbeResult:
    """
    Outcome of a distributed-cache liveness probe.

    Attributes:
        healthy: True if the distributed cache answered the liveness check
        latency_ms: Time spent probing
        error: Failure description when unhealthy
    """

    healthy: bool
    latency_ms: int
    error: Optional[str] = None


class CacheTierSelector:
    """
    Chooses between the distributed and the local cache tier.

    Attributes:
        distributed_enabled: False skips the probe and goes straight to local
        fallback_on_error: Demote to local when a distributed operation fails
        probe_timeout: Seconds allowed for the liveness check
        local: Local backend, one instance for the whole process lifetime
    """

    def __init__(
        self,
        distributed_factory: Optional[Callable[[], CacheBackend]] = None,
        local: Optional[LocalCacheBackend] = None,
        distributed_enabled: bool = True,
        fallback_on_error: bool = True,
        probe_timeout: float = 5.0,
    ):
        self._distributed_factory = distributed_factory
        self._distributed: Optional[CacheBackend] = None
        self.local = local or LocalCacheBackend()
        self.distributed_enabled = distributed_enabled and distributed_factory is not None
        self.fallback_on_error = fallback_on_error
        self.probe_timeout = probe_timeout

        self._state = TierState.UNINITIALIZED
        self._active: Optional[CacheBackend] = None
        self._last_probe: Optional[ProbeResult] = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "CacheTierSelector":
        """Build a selector whose distributed tier is the configured Redis."""

        def redis_backend() -> CacheBackend:
            return RedisCacheBackend(
                RedisClient.get_async_client(settings),
                key_prefix=settings.REDIS_KEY_PREFIX,
                ttl_seconds=settings.CACHE_TTL_SECONDS,
            )

        return cls(
            distributed_factory=redis_backend,
            distributed_enabled=settings.CACHE_TYPE.lower() == "redis",
            fallback_on_error=settings.CACHE_FALLBACK_ON_ERROR,
        )

    @property
    def state(self) -> TierState:
        return self._state

    @property
    def tier(self) -> Optional[CacheTier]:
        """Active tier, or None before initialization."""
        return self._active.tier if self._active is not None else None

    @property
    def last_probe(self) -> Optional[ProbeResult]:
        return self._last_probe

    async def initialize(self) -> CacheBackend:
        """
        Resolve the active tier once.

        Subsequent calls return the already active backend without probing.

        Returns:
            Active cache backend
        """
        async with self._lock:
            if self._active is not None:
                return self._active

            if not self.distributed_enabled:
                logger.info("Distributed cache disabled, using local in-memory cache")
                return self._activate_local()

            return await self._select()

    async def active_backend(self) -> CacheBackend:
        """Backend every cache operation must use (initializes lazily)."""
        if self._active is not None:
            return self._active
        return await self.initialize()

    async def probe(self) -> ProbeResult:
        """
        Check that the distributed cache is reachable.

        Any failure (connection refused, timeout, authentication, bad URL) is
        reported in the result instead of raised.
        """
        start_time = time.perf_counter()
        try:
            if self._distributed is None:
                if self._distributed_factory is None:
                    raise CacheUnavailable("No distributed cache configured")
                self._distributed = self._distributed_factory()
            alive = await asyncio.wait_for(self._distributed.ping(), timeout=self.probe_timeout)
        except Exception as e:
            result = ProbeResult(
                healthy=False,
                latency_ms=int((time.perf_counter() - start_time) * 1000),
                error=f"{type(e).__name__}: {e}",
            )
        else:
            result = ProbeResult(
                healthy=alive,
                latency_ms=int((time.perf_counter() - start_time) * 1000),
                error=None if alive else "PING returned a falsy reply",
            )

        self._last_probe = result
        return result

    async def reprobe(self) -> CacheTier:
        """
        Explicitly re-evaluate the tier choice.

        The only path from LOCAL_FALLBACK back to DISTRIBUTED_ACTIVE.

        Returns:
            Tier active after the re-probe
        """
        async with self._lock:
            if not self.distributed_enabled:
                self._activate_local()
            else:
                await self._select()
        return self._active.tier

    async def handle_failure(self, error: CacheUnavailable) -> Optional[CacheBackend]:
        """
        React to a runtime failure of the distributed tier.

        Returns:
            Backend to retry the operation on, or None to skip caching for it
        """
        if not self.fallback_on_error:
            logger.warning("Distributed cache operation failed, skipping cache", error=error.message)
            return None

        self.demote(error.message)
        return self.local

    def demote(self, reason: str) -> None:
        """Switch DISTRIBUTED_ACTIVE to LOCAL_FALLBACK (one-way until reprobe)."""
        if self._state == TierState.LOCAL_FALLBACK:
            return
        logger.warning(
            "Distributed cache failed at runtime, falling back to local cache",
            reason=reason,
        )
        self._activate_local()

    async def _select(self) -> CacheBackend:
        """Probe the distributed tier and activate the tier the result points at."""
        self._state = TierState.PROBING_DISTRIBUTED
        result = await self.probe()

        if result.healthy:
            self._active = self._distributed
            self._state = TierState.DISTRIBUTED_ACTIVE
            cache_tier.set(1)
            logger.info(
                "Distributed cache reachable, using Redis cache",
                latency_ms=result.latency_ms,
            )
            return self._active

        logger.warning(
            "Distributed cache unreachable, falling back to local in-memory cache",
            error=result.error,
            latency_ms=result.latency_ms,
        )
        return self._activate_local()

    def _activate_local(self) -> CacheBackend:
        self._active = self.local
        self._state = TierState.LOCAL_FALLBACK
        cache_tier.set(0)
        return self._active

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(state={self._state.value}, tier={self.tier})"
