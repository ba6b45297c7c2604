"""
Resilient wrapper around a single outbound HTTP call.

Both upstreams (content API and generative-text API) go through the same
ResilientClient: a fixed per-call timeout, error classification into the
resilience taxonomy, and bounded sequential retries driven by RetryPolicy.

Usage:
    client = ResilientClient(http_client, RetryPolicy(), timeout=120, name="generative_api")
    response = await client.execute(RequestDescriptor("POST", "/v1/messages", json=payload))
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional

import httpx
import structlog

from content_gateway.monitoring.metrics import upstream_attempts_total, upstream_latency_seconds
from content_gateway.resilience.exceptions import (
    RetriesExhausted,
    TransportError,
    UpstreamError,
    UpstreamTimeoutError,
)
from content_gateway.resilience.policy import RetryPolicy
from content_gateway.resilience.state import RetryState

logger = structlog.get_logger(__name__)

_OUTCOMES = {
    UpstreamTimeoutError: "timeout",
    UpstreamError: "upstream_error",
    TransportError: "transport_error",
}


@dataclass(frozen=True)
class RequestDescriptor:
    """
    Everything needed to (re)dispatch one outbound request.

    Attributes:
        method: HTTP method
        path: Path relative to the client's base URL
        params: Query parameters
        json: JSON body
        headers: Extra per-request headers
    """

    method: str
    path: str
    params: Optional[Mapping[str, Any]] = None
    json: Any = None
    headers: Optional[Mapping[str, str]] = None


class ResilientClient:
    """
    Timeout + retry + error classification for one upstream.

    Attempts are strictly sequential: attempt N+1 is only dispatched after
    attempt N has failed and the backoff delay has elapsed.

    Attributes:
        http_client: Shared httpx AsyncClient configured with the upstream base URL
        policy: Retry policy deciding retries and backoff
        timeout: Per-attempt timeout in seconds, dispatch to response completion
        name: Upstream name used in logs and metrics
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        policy: RetryPolicy,
        timeout: float = 120.0,
        name: str = "upstream",
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.http_client = http_client
        self.policy = policy
        self.timeout = timeout
        self.name = name
        self._sleep = sleep

    async def execute(self, request: RequestDescriptor) -> httpx.Response:
        """
        Dispatch the request, retrying transient failures.

        Args:
            request: Request to dispatch (re-sent unchanged on retry)

        Returns:
            Successful (2xx/3xx) httpx response

        Raises:
            UpstreamError: Non-retryable HTTP status (4xx other than 429)
            TransportError: Connection could not be established
            RetriesExhausted: Retryable failures (5xx, 429, timeouts) outlasted the retry budget
        """
        state = RetryState(max_retries=self.policy.max_retries)

        while True:
            attempt = state.record_attempt()
            start_time = time.perf_counter()

            try:
                response = await self._dispatch(request)
            except (UpstreamTimeoutError, UpstreamError, TransportError) as exc:
                latency = time.perf_counter() - start_time
                state.record_failure(exc)
                upstream_attempts_total.labels(upstream=self.name, outcome=_OUTCOMES[type(exc)]).inc()
                upstream_latency_seconds.labels(upstream=self.name).observe(latency)

                logger.warning(
                    "Upstream attempt failed",
                    upstream=self.name,
                    method=request.method,
                    path=request.path,
                    attempt=attempt,
                    error_type=type(exc).__name__,
                    error=exc.message,
                    latency_ms=int(latency * 1000),
                )

                if self.policy.should_retry(exc, attempt):
                    delay = self.policy.backoff_delay(attempt)
                    state.record_backoff(delay)
                    logger.info(
                        "Retrying upstream call",
                        upstream=self.name,
                        next_attempt=attempt + 1,
                        backoff_seconds=delay,
                    )
                    await self._sleep(delay)
                    continue

                if self.policy.is_retryable(exc):
                    logger.error(
                        "Upstream retries exhausted",
                        upstream=self.name,
                        path=request.path,
                        attempts=state.attempts,
                        retries_used=state.retries_used,
                        errors=state.errors,
                        total_backoff_seconds=state.total_backoff_seconds,
                    )
                    raise RetriesExhausted(last_error=exc, attempts=state.attempts) from exc

                raise

            latency = time.perf_counter() - start_time
            upstream_attempts_total.labels(upstream=self.name, outcome="success").inc()
            upstream_latency_seconds.labels(upstream=self.name).observe(latency)

            logger.info(
                "Upstream attempt succeeded",
                upstream=self.name,
                method=request.method,
                path=request.path,
                attempt=attempt,
                status_code=response.status_code,
                latency_ms=int(latency * 1000),
            )
            return response

    async def _dispatch(self, request: RequestDescriptor) -> httpx.Response:
        """Send one attempt and translate failures into the resilience taxonomy."""
        try:
            response = await asyncio.wait_for(
                self.http_client.request(
                    request.method,
                    request.path,
                    params=request.params,
                    json=request.json,
                    headers=request.headers,
                ),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise UpstreamTimeoutError(
                f"{self.name} did not respond within {self.timeout}s",
                details={"path": request.path, "timeout": self.timeout},
            ) from e
        except httpx.TransportError as e:
            raise TransportError(
                f"Unable to reach {self.name}: {e}",
                details={"path": request.path, "error": str(e)},
            ) from e

        if response.is_error:
            raise UpstreamError(response.status_code, body=response.text)

        return response

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"name={self.name}, "
            f"timeout={self.timeout}s, "
            f"policy={self.policy!r})"
        )
