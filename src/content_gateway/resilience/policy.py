"""
Retry decision logic for outbound calls.

Pure functions of (error, attempt): no I/O, no sleeping. The client that
consults the policy does the waiting.
"""

import random

from content_gateway.resilience.exceptions import UpstreamError, UpstreamTimeoutError

TOO_MANY_REQUESTS = 429


class RetryPolicy:
    """
    Bounded exponential-backoff retry policy.

    Retryable errors are server-side failures (HTTP >= 500), explicit rate
    limiting (HTTP 429) and timeouts. Anything else is surfaced immediately.

    Backoff is ``base_delay * 2 ** (attempt - 1)``: 1s, 2s, 4s with the
    defaults. Optional jitter adds up to ``jitter * delay`` on top of that
    floor and never shortens the wait.

    Attributes:
        max_retries: Retries authorized after the first call
        base_delay: Delay before the first retry, in seconds
        jitter: Fraction of the delay that may be added randomly (0 disables)
    """

    def __init__(self, max_retries: int = 3, base_delay: float = 1.0, jitter: float = 0.0):
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if base_delay < 0:
            raise ValueError("base_delay must be >= 0")
        if jitter < 0:
            raise ValueError("jitter must be >= 0")

        self.max_retries = max_retries
        self.base_delay = base_delay
        self.jitter = jitter

    @classmethod
    def from_settings(cls, settings) -> "RetryPolicy":
        return cls(
            max_retries=settings.RETRY_MAX_RETRIES,
            base_delay=settings.RETRY_BACKOFF_BASE_SECONDS,
            jitter=settings.RETRY_JITTER,
        )

    @staticmethod
    def is_retryable(error: BaseException) -> bool:
        """Classify an error as transient (worth re-attempting) or not."""
        if isinstance(error, UpstreamTimeoutError):
            return True
        if isinstance(error, UpstreamError):
            return error.status_code >= 500 or error.status_code == TOO_MANY_REQUESTS
        return False

    def should_retry(self, error: BaseException, attempt: int) -> bool:
        """
        Decide whether the call should be re-dispatched.

        Args:
            error: Error raised by the attempt that just failed
            attempt: 1-based number of that attempt

        Returns:
            True if the error is retryable and the retry budget allows another call
        """
        return self.is_retryable(error) and attempt <= self.max_retries

    def backoff_delay(self, attempt: int) -> float:
        """
        Seconds to wait after the given failed attempt before retrying.

        Args:
            attempt: 1-based number of the attempt that just failed
        """
        if attempt < 1:
            raise ValueError("attempt must be >= 1")

        delay = self.base_delay * (2 ** (attempt - 1))
        if self.jitter:
            delay += random.uniform(0, self.jitter * delay)
        return delay

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"max_retries={self.max_retries}, "
            f"base_delay={self.base_delay}s, "
            f"jitter={self.jitter})"
        )
