"""
Unit tests for ResilientClient.

Upstreams are faked with httpx.MockTransport; backoff waits are recorded by
a fake sleep so the tests never actually wait.
"""

import asyncio
from unittest.mock import patch

import httpx
import pytest

from content_gateway.resilience.client import RequestDescriptor, ResilientClient
from content_gateway.resilience.exceptions import (
    RetriesExhausted,
    TransportError,
    UpstreamError,
    UpstreamTimeoutError,
)
from content_gateway.resilience.policy import RetryPolicy
from content_gateway.resilience.state import RetryState


def make_client(transport, fake_sleep, policy=None, timeout=5.0):
    http = httpx.AsyncClient(base_url="http://upstream.test", transport=transport)
    return ResilientClient(
        http,
        policy or RetryPolicy(max_retries=3, base_delay=1.0),
        timeout=timeout,
        name="test_api",
        sleep=fake_sleep,
    )


REQUEST = RequestDescriptor("GET", "/posts/1")


@pytest.mark.asyncio
async def test_success_on_first_attempt(scripted_transport, fake_sleep):
    transport = scripted_transport([(200, {"id": 1})])
    client = make_client(transport, fake_sleep)

    response = await client.execute(REQUEST)

    assert response.json() == {"id": 1}
    assert len(transport.calls) == 1
    fake_sleep.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("failures", [1, 2, 3])
async def test_retryable_failures_then_success(scripted_transport, fake_sleep, failures):
    """Upstream is called exactly 1 + failures times and the success value is returned."""
    script = [(503, {"error": "unavailable"})] * failures + [(200, {"ok": True})]
    transport = scripted_transport(script)
    client = make_client(transport, fake_sleep)

    response = await client.execute(REQUEST)

    assert response.json() == {"ok": True}
    assert len(transport.calls) == 1 + failures
    assert [call.args[0] for call in fake_sleep.await_args_list] == [1.0, 2.0, 4.0][:failures]


@pytest.mark.asyncio
async def test_rate_limit_and_timeout_are_retried(scripted_transport, fake_sleep):
    transport = scripted_transport(
        [(429, {}), httpx.ReadTimeout("read timed out"), (200, {"ok": True})]
    )
    client = make_client(transport, fake_sleep)

    response = await client.execute(REQUEST)

    assert response.status_code == 200
    assert len(transport.calls) == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [400, 401, 404, 422])
async def test_non_retryable_status_propagates_unchanged(scripted_transport, fake_sleep, status_code):
    transport = scripted_transport([(status_code, {"error": "nope"}), (200, {})])
    client = make_client(transport, fake_sleep)

    with pytest.raises(UpstreamError) as exc_info:
        await client.execute(REQUEST)

    assert exc_info.value.status_code == status_code
    assert len(transport.calls) == 1
    fake_sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_transport_error_not_retried(scripted_transport, fake_sleep):
    transport = scripted_transport([httpx.ConnectError("connection refused")])
    client = make_client(transport, fake_sleep)

    with pytest.raises(TransportError):
        await client.execute(REQUEST)

    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_retries_exhausted_carries_last_error(scripted_transport, fake_sleep):
    transport = scripted_transport([(500, {}), (502, {}), (503, {}), (504, {"last": True})])
    client = make_client(transport, fake_sleep)

    with pytest.raises(RetriesExhausted) as exc_info:
        await client.execute(REQUEST)

    error = exc_info.value
    assert error.attempts == 4
    assert isinstance(error.last_error, UpstreamError)
    assert error.last_error.status_code == 504
    assert error.__cause__ is error.last_error
    assert len(transport.calls) == 4
    assert fake_sleep.await_count == 3


@pytest.mark.asyncio
async def test_exhaustion_log_reports_retries_used(scripted_transport, fake_sleep):
    transport = scripted_transport([(503, {})])
    client = make_client(transport, fake_sleep, policy=RetryPolicy(max_retries=2, base_delay=1.0))

    with patch("content_gateway.resilience.client.logger") as mock_logger:
        with pytest.raises(RetriesExhausted):
            await client.execute(REQUEST)

    event, = [c for c in mock_logger.error.call_args_list if c.args[0] == "Upstream retries exhausted"]
    assert event.kwargs["attempts"] == 3
    assert event.kwargs["retries_used"] == 2
    assert event.kwargs["total_backoff_seconds"] == 3.0


@pytest.mark.asyncio
async def test_retry_budget_follows_policy(scripted_transport, fake_sleep):
    transport = scripted_transport([(500, {})])
    client = make_client(transport, fake_sleep, policy=RetryPolicy(max_retries=1, base_delay=0.1))

    with pytest.raises(RetriesExhausted) as exc_info:
        await client.execute(REQUEST)

    assert exc_info.value.attempts == 2
    assert len(transport.calls) == 2


@pytest.mark.asyncio
async def test_slow_upstream_times_out(fake_sleep):
    async def slow_handler(request):
        await asyncio.sleep(1.0)
        return httpx.Response(200, json={})

    client = make_client(
        httpx.MockTransport(slow_handler),
        fake_sleep,
        policy=RetryPolicy(max_retries=0),
        timeout=0.01,
    )

    with pytest.raises(RetriesExhausted) as exc_info:
        await client.execute(REQUEST)

    assert isinstance(exc_info.value.last_error, UpstreamTimeoutError)


@pytest.mark.asyncio
async def test_request_is_redispatched_unchanged(scripted_transport, fake_sleep):
    transport = scripted_transport([(503, {}), (200, {"ok": True})])
    client = make_client(transport, fake_sleep)

    await client.execute(
        RequestDescriptor("POST", "/v1/messages", json={"prompt": "hi"}, headers={"x-test": "1"})
    )

    first, second = transport.calls
    assert first.method == second.method == "POST"
    assert first.url == second.url
    assert first.content == second.content
    assert second.headers["x-test"] == "1"


def test_retry_state_bookkeeping():
    state = RetryState(max_retries=3)

    assert state.record_attempt() == 1
    state.record_failure(UpstreamError(500))
    state.record_backoff(1.0)
    assert state.record_attempt() == 2

    assert state.retries_used == 1
    assert state.errors == ["UpstreamError"]
    assert state.total_backoff_seconds == 1.0
