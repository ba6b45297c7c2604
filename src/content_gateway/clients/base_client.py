"""
Abstract base client for upstream HTTP APIs.

Both upstreams (content API, generative-text API) share connection pooling
and the ResilientClient call path. Subclasses only describe requests and
parse responses.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
import structlog

from content_gateway.resilience.client import RequestDescriptor, ResilientClient
from content_gateway.resilience.policy import RetryPolicy

logger = structlog.get_logger(__name__)


class BaseUpstreamClient(ABC):
    """
    Abstract base class for upstream API clients.

    Responsibilities:
    - Own one persistent httpx AsyncClient (connection pooling)
    - Route every call through ResilientClient (timeout, retry, classification)
    - Provide a health check that never raises

    Does NOT handle:
    - Caching (that's CacheAsideFetcher's job)
    - Retry decisions (that's RetryPolicy's job)
    """

    upstream_name = "upstream"

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        retry_policy: Optional[RetryPolicy] = None,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        connection_limits: Optional[httpx.Limits] = None,
        **kwargs,
    ):
        """
        Initialize base client.

        Args:
            base_url: Base URL of the upstream API
            timeout: Per-attempt timeout in seconds
            retry_policy: Retry policy (default: 3 retries, 1s base backoff)
            headers: Default headers sent with every request
            transport: Custom httpx transport (tests use httpx.MockTransport)
            connection_limits: httpx connection pool limits
            **kwargs: Extra ResilientClient options (e.g. ``sleep``)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_policy = retry_policy or RetryPolicy()
        self.headers = headers or {}

        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=httpx.Timeout(timeout),
            limits=connection_limits
            or httpx.Limits(max_keepalive_connections=5, max_connections=20, keepalive_expiry=30.0),
            transport=transport,
            follow_redirects=True,
        )
        self.resilient = ResilientClient(
            self._http,
            self.retry_policy,
            timeout=timeout,
            name=self.upstream_name,
            **kwargs,
        )

        logger.info(
            "Initialized upstream client",
            client_class=self.__class__.__name__,
            base_url=self.base_url,
            timeout=timeout,
            max_retries=self.retry_policy.max_retries,
        )

    async def _execute(self, request: RequestDescriptor) -> Any:
        """Run a request through the resilient path and decode the JSON body."""
        response = await self.resilient.execute(request)
        return response.json()

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the upstream is reachable.

        Returns:
            True if healthy, False otherwise

        Note:
            Must NOT raise exceptions - return False on error.
        """
        pass

    async def close(self):
        """Close pooled connections (call on shutdown)."""
        logger.debug("Closing upstream client", client_class=self.__class__.__name__)
        await self._http.aclose()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"base_url={self.base_url}, "
            f"timeout={self.timeout}s)"
        )
