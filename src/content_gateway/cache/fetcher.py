"""
Cache-aside fetching.

The caller checks the cache, and on a miss invokes the loader (the source of
truth) and populates the cache itself. Each fetcher is bound to one region
and one value type, so a region never mixes value shapes.

Concurrent misses for the same key are NOT coalesced by default: two misses
may both call the loader, and the last write wins. Set ``single_flight`` to
share one in-flight load per key instead.
"""

import asyncio
import json
from typing import Any, Awaitable, Callable, Generic, Optional, Sequence, TypeVar

import structlog
from pydantic import TypeAdapter

from content_gateway.cache.backends import CacheBackend, CacheEntry
from content_gateway.cache.exceptions import CacheUnavailable
from content_gateway.cache.tier_selector import CacheTierSelector
from content_gateway.monitoring.metrics import cache_lookups_total

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def make_cache_key(operation: str, params: Sequence[Any] = ()) -> str:
    """
    Derive a deterministic cache key.

    Positional parameter order is preserved; mapping parameters are encoded
    with sorted keys so ``{"a": 1, "b": 2}`` and ``{"b": 2, "a": 1}`` match.

    Args:
        operation: Operation name (namespaces keys of different endpoints)
        params: Ordered parameter values

    Returns:
        Key of the form ``operation:<json>``
    """
    encoded = json.dumps(list(params), sort_keys=True, separators=(",", ":"), default=str)
    return f"{operation}:{encoded}"


class CacheAsideFetcher(Generic[T]):
    """
    Generic cache-aside wrapper for one cache region.

    Attributes:
        selector: Tier selector shared by every fetcher in the process
        region: Cache region (namespace) this fetcher reads and writes
        single_flight: Coalesce concurrent misses for the same key
    """

    def __init__(
        self,
        selector: CacheTierSelector,
        region: str,
        value_type: Any = Any,
        single_flight: bool = False,
    ):
        self.selector = selector
        self.region = region
        self.single_flight = single_flight
        self._adapter: TypeAdapter[T] = TypeAdapter(value_type)
        self._in_flight: dict[str, asyncio.Future] = {}

    async def fetch(
        self,
        operation: str,
        params: Sequence[Any],
        loader: Callable[[], Awaitable[T]],
    ) -> T:
        """
        Serve from cache, or load, store and return.

        Args:
            operation: Operation name
            params: Ordered parameter values of the call
            loader: Coroutine factory calling the source of truth

        Returns:
            Cached or freshly loaded value

        Raises:
            Whatever the loader raises; nothing is cached in that case
        """
        key = make_cache_key(operation, params)

        entry = await self._get(key)
        if entry is not None:
            cache_lookups_total.labels(region=self.region, result="hit").inc()
            logger.debug("Cache hit", region=self.region, key=key, tier=entry.tier.value)
            return self._adapter.validate_json(entry.value)

        cache_lookups_total.labels(region=self.region, result="miss").inc()
        logger.info("Cache miss", region=self.region, key=key)

        if self.single_flight:
            return await self._load_shared(key, loader)
        return await self._load_and_store(key, loader)

    async def evict(self, operation: str, params: Sequence[Any]) -> bool:
        """Remove one entry. Returns True if something was deleted."""
        key = make_cache_key(operation, params)
        return bool(await self._call("delete", key))

    async def clear(self) -> int:
        """Remove every entry of this fetcher's region on the active tier."""
        backend = await self.selector.active_backend()
        try:
            return await backend.clear(self.region)
        except CacheUnavailable as e:
            fallback = await self.selector.handle_failure(e)
            return await fallback.clear(self.region) if fallback is not None else 0

    async def _load_and_store(self, key: str, loader: Callable[[], Awaitable[T]]) -> T:
        value = await loader()
        payload = self._adapter.dump_json(value).decode("utf-8")
        await self._call("set", key, payload)
        # Decode from the stored text so a miss returns exactly what later hits return
        return self._adapter.validate_json(payload)

    async def _load_shared(self, key: str, loader: Callable[[], Awaitable[T]]) -> T:
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load_and_store(key, loader))
            self._in_flight[key] = task
            task.add_done_callback(lambda _: self._in_flight.pop(key, None))
        else:
            logger.debug("Joining in-flight load", region=self.region, key=key)
        # Shielded: a cancelled waiter must not cancel the load other waiters share
        return await asyncio.shield(task)

    async def _get(self, key: str) -> Optional[CacheEntry]:
        return await self._call("get", key)

    async def _call(self, operation: str, key: str, *args: Any) -> Any:
        """Run a backend operation on the active tier, recovering from tier failure."""
        backend: CacheBackend = await self.selector.active_backend()
        try:
            return await getattr(backend, operation)(self.region, key, *args)
        except CacheUnavailable as e:
            fallback = await self.selector.handle_failure(e)
            if fallback is None:
                return None
            return await getattr(fallback, operation)(self.region, key, *args)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(region={self.region}, selector={self.selector!r})"
