"""
Resilient outbound-call layer.

Shared by the content-API client and the generative-text client:

1. **RetryPolicy**: classifies errors and computes exponential backoff
2. **ResilientClient**: per-call timeout, sequential retries, one log record per attempt
3. **Exceptions**: UpstreamTimeoutError, UpstreamError, TransportError, RetriesExhausted

Usage:
    >>> from content_gateway.resilience import ResilientClient, RetryPolicy, RequestDescriptor
    >>> client = ResilientClient(http_client, RetryPolicy(max_retries=3), timeout=120)
    >>> response = await client.execute(RequestDescriptor("GET", "/posts"))
"""

from content_gateway.resilience.client import RequestDescriptor, ResilientClient
from content_gateway.resilience.exceptions import (
    RetriesExhausted,
    TransportError,
    UpstreamError,
    UpstreamTimeoutError,
)
from content_gateway.resilience.policy import RetryPolicy
from content_gateway.resilience.state import RetryState

__all__ = [
    "RequestDescriptor",
    "ResilientClient",
    "RetryPolicy",
    "RetryState",
    "RetriesExhausted",
    "TransportError",
    "UpstreamError",
    "UpstreamTimeoutError",
]
