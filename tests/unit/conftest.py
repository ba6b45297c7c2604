"""Unit test fixtures (mocks and stubs).

Provides mock objects for testing without external dependencies.
"""

from typing import Callable, List
from unittest.mock import AsyncMock

import httpx
import pytest

from content_gateway.cache.backends import LocalCacheBackend
from content_gateway.cache.tier_selector import CacheTierSelector


@pytest.fixture
def mock_async_redis():
    """Mock AsyncRedis client for unit tests (async)."""
    mock = AsyncMock()
    mock.ping = AsyncMock(return_value=True)
    mock.hgetall = AsyncMock(return_value={})
    mock.hset = AsyncMock(return_value=2)
    mock.expire = AsyncMock(return_value=True)
    mock.delete = AsyncMock(return_value=1)
    return mock


@pytest.fixture
def fake_sleep() -> AsyncMock:
    """Replacement for asyncio.sleep that records backoff delays without waiting."""
    return AsyncMock(return_value=None)


@pytest.fixture
def local_selector() -> CacheTierSelector:
    """Tier selector with the distributed tier disabled."""
    return CacheTierSelector(distributed_factory=None, local=LocalCacheBackend())


@pytest.fixture
def scripted_transport() -> Callable[[List], httpx.MockTransport]:
    """Build a MockTransport that replays a script of responses / exceptions.

    Each script item is either a ``(status_code, json_body)`` tuple or an
    exception instance to raise. The last item repeats once the script runs
    out. The transport exposes the recorded requests as ``.calls``.
    """

    def build(script: List) -> httpx.MockTransport:
        calls: List[httpx.Request] = []
        remaining = list(script)

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            item = remaining.pop(0) if len(remaining) > 1 else remaining[0]
            if isinstance(item, Exception):
                raise item
            status_code, body = item
            return httpx.Response(status_code, json=body)

        transport = httpx.MockTransport(handler)
        transport.calls = calls
        return transport

    return build
