"""
Exceptions raised by the resilient outbound-call layer.

The taxonomy separates failures the retry policy may recover from
(timeouts, server errors, rate limiting) from failures that indicate the
request itself is wrong and must surface immediately.
"""

from content_gateway.exceptions import GatewayError


class UpstreamTimeoutError(GatewayError):
    """
    Raised when an upstream call does not complete within the per-call timeout.

    Always retryable.
    """
    pass


class UpstreamError(GatewayError):
    """
    Raised when the upstream answers with a non-success HTTP status.

    Retryable for 5xx and 429, non-retryable for every other status.

    Attributes:
        status_code: HTTP status returned by the upstream
        body: Response body text (truncated) for diagnostics
    """

    def __init__(self, status_code: int, message: str | None = None, body: str = ""):
        super().__init__(
            message or f"Upstream returned HTTP {status_code}",
            details={"status_code": status_code, "body": body[:500]},
        )
        self.status_code = status_code
        self.body = body


class TransportError(GatewayError):
    """
    Raised on network failures other than timeouts.

    Connection refused, DNS failures, TLS errors. Non-retryable: a connection
    that cannot be set up is not expected to heal within the backoff window.
    """
    pass


class RetriesExhausted(GatewayError):
    """
    Raised when every authorized retry has failed.

    The last underlying error is kept untouched on ``last_error`` (and as
    ``__cause__`` when raised with ``from``), so callers can still inspect
    the original status code or timeout.

    Attributes:
        last_error: Final error returned by the upstream
        attempts: Total number of upstream calls made
    """

    def __init__(self, last_error: GatewayError, attempts: int):
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(
            f"Upstream call failed after {attempts} attempts. "
            f"Final error: {type(last_error).__name__}: {last_error}",
            details={
                "attempts": attempts,
                "last_error_type": type(last_error).__name__,
                **last_error.details,
            },
        )
