"""
Unit tests for CacheTierSelector.

The distributed tier is a mock backend, so probe outcomes are scripted.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from content_gateway.cache.backends import CacheTier, LocalCacheBackend
from content_gateway.cache.exceptions import CacheUnavailable
from content_gateway.cache.fetcher import CacheAsideFetcher
from content_gateway.cache.tier_selector import CacheTierSelector, TierState


def make_distributed(ping=None):
    backend = MagicMock()
    backend.tier = CacheTier.DISTRIBUTED
    backend.ping = ping or AsyncMock(return_value=True)
    backend.get = AsyncMock(return_value=None)
    backend.set = AsyncMock()
    backend.delete = AsyncMock(return_value=False)
    backend.clear = AsyncMock(return_value=0)
    return backend


@pytest.mark.asyncio
async def test_starts_uninitialized():
    selector = CacheTierSelector(distributed_factory=make_distributed)
    assert selector.state == TierState.UNINITIALIZED
    assert selector.tier is None


@pytest.mark.asyncio
async def test_healthy_probe_activates_distributed():
    distributed = make_distributed()
    selector = CacheTierSelector(distributed_factory=lambda: distributed)

    backend = await selector.initialize()

    assert backend is distributed
    assert selector.state == TierState.DISTRIBUTED_ACTIVE
    assert selector.tier == CacheTier.DISTRIBUTED
    assert selector.last_probe.healthy is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "failure",
    [ConnectionRefusedError("refused"), asyncio.TimeoutError(), PermissionError("NOAUTH")],
)
async def test_any_probe_failure_falls_back_to_local(failure):
    distributed = make_distributed(ping=AsyncMock(side_effect=failure))
    selector = CacheTierSelector(distributed_factory=lambda: distributed)

    backend = await selector.initialize()

    assert backend is selector.local
    assert selector.state == TierState.LOCAL_FALLBACK
    assert selector.last_probe.healthy is False
    assert selector.last_probe.error


@pytest.mark.asyncio
async def test_factory_failure_falls_back_to_local():
    def broken_factory():
        raise ValueError("invalid redis URL")

    selector = CacheTierSelector(distributed_factory=broken_factory)

    await selector.initialize()

    assert selector.state == TierState.LOCAL_FALLBACK


@pytest.mark.asyncio
async def test_falsy_ping_counts_as_unhealthy():
    selector = CacheTierSelector(
        distributed_factory=lambda: make_distributed(ping=AsyncMock(return_value=False))
    )

    await selector.initialize()

    assert selector.state == TierState.LOCAL_FALLBACK


@pytest.mark.asyncio
async def test_slow_probe_times_out():
    async def hang():
        await asyncio.sleep(10)

    selector = CacheTierSelector(
        distributed_factory=lambda: make_distributed(ping=AsyncMock(side_effect=hang)),
        probe_timeout=0.01,
    )

    await selector.initialize()

    assert selector.state == TierState.LOCAL_FALLBACK


@pytest.mark.asyncio
async def test_decision_is_made_once():
    distributed = make_distributed()
    selector = CacheTierSelector(distributed_factory=lambda: distributed)

    await selector.initialize()
    await selector.initialize()
    await selector.active_backend()

    distributed.ping.assert_awaited_once()


@pytest.mark.asyncio
async def test_concurrent_initialization_probes_once():
    distributed = make_distributed()
    selector = CacheTierSelector(distributed_factory=lambda: distributed)

    await asyncio.gather(*(selector.active_backend() for _ in range(5)))

    distributed.ping.assert_awaited_once()


@pytest.mark.asyncio
async def test_disabled_distributed_skips_probe():
    distributed = make_distributed()
    selector = CacheTierSelector(distributed_factory=lambda: distributed, distributed_enabled=False)

    await selector.initialize()

    assert selector.state == TierState.LOCAL_FALLBACK
    distributed.ping.assert_not_awaited()


@pytest.mark.asyncio
async def test_unreachable_at_startup_never_touches_distributed_again():
    """Scenario: all fetches are served by loader + local cache for the process lifetime."""
    distributed = make_distributed(ping=AsyncMock(side_effect=ConnectionRefusedError()))
    selector = CacheTierSelector(distributed_factory=lambda: distributed)
    await selector.initialize()

    fetcher = CacheAsideFetcher(selector, "by-id", int)
    loader = AsyncMock(side_effect=[1, 2])

    assert await fetcher.fetch("record_by_id", [1], loader) == 1
    assert await fetcher.fetch("record_by_id", [1], loader) == 1
    assert await fetcher.fetch("record_by_id", [2], loader) == 2

    assert loader.await_count == 2
    distributed.get.assert_not_called()
    distributed.set.assert_not_called()
    assert distributed.ping.await_count == 1
    assert selector.local.size("by-id") == 2


@pytest.mark.asyncio
async def test_reprobe_recovers_distributed():
    distributed = make_distributed(ping=AsyncMock(side_effect=[ConnectionRefusedError(), True]))
    selector = CacheTierSelector(distributed_factory=lambda: distributed)
    await selector.initialize()
    assert selector.state == TierState.LOCAL_FALLBACK

    tier = await selector.reprobe()

    assert tier == CacheTier.DISTRIBUTED
    assert selector.state == TierState.DISTRIBUTED_ACTIVE


@pytest.mark.asyncio
async def test_reprobe_with_distributed_disabled_stays_local():
    selector = CacheTierSelector(distributed_factory=None)

    assert await selector.reprobe() == CacheTier.LOCAL


@pytest.mark.asyncio
async def test_handle_failure_demotes_to_local():
    selector = CacheTierSelector(distributed_factory=make_distributed)
    await selector.initialize()

    fallback = await selector.handle_failure(CacheUnavailable("Redis GET failed"))

    assert fallback is selector.local
    assert selector.state == TierState.LOCAL_FALLBACK
    assert await selector.active_backend() is selector.local


@pytest.mark.asyncio
async def test_handle_failure_without_fallback_skips_cache():
    selector = CacheTierSelector(distributed_factory=make_distributed, fallback_on_error=False)
    await selector.initialize()

    assert await selector.handle_failure(CacheUnavailable("Redis GET failed")) is None
    assert selector.state == TierState.DISTRIBUTED_ACTIVE


def test_from_settings_local(test_settings):
    selector = CacheTierSelector.from_settings(test_settings)
    assert selector.distributed_enabled is False


def test_from_settings_redis(test_settings):
    test_settings.CACHE_TYPE = "redis"
    test_settings.CACHE_FALLBACK_ON_ERROR = False

    selector = CacheTierSelector.from_settings(test_settings)

    assert selector.distributed_enabled is True
    assert selector.fallback_on_error is False
    assert isinstance(selector.local, LocalCacheBackend)
