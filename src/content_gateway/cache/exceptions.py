"""
Cache-layer exceptions.

CacheUnavailable never reaches API callers: the fetcher recovers from it by
demoting to the local tier (or by treating the lookup as a miss).
"""

from content_gateway.exceptions import GatewayError


class CacheUnavailable(GatewayError):
    """
    Raised by a distributed backend when Redis cannot serve an operation.

    Wraps connection refused, timeouts, authentication and protocol errors.
    """
    pass
