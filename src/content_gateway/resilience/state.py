"""
Per-call retry bookkeeping.

A RetryState lives for exactly one logical outbound call and is never
persisted or shared between calls.
"""

from dataclasses import dataclass, field


@dataclass
class RetryState:
    """
    Attempt counter and accumulated backoff for one logical call.

    Attributes:
        max_retries: Retries authorized after the first call
        attempts: Upstream calls made so far (0 before dispatch)
        total_backoff_seconds: Sum of all backoff delays waited
        errors: Error type names of failed attempts, in order
    """

    max_retries: int = 3
    attempts: int = 0
    total_backoff_seconds: float = 0.0
    errors: list[str] = field(default_factory=list)

    def record_attempt(self) -> int:
        """Count a new dispatch and return its 1-based number."""
        self.attempts += 1
        return self.attempts

    def record_failure(self, error: Exception) -> None:
        self.errors.append(type(error).__name__)

    def record_backoff(self, delay: float) -> None:
        self.total_backoff_seconds += delay

    @property
    def retries_used(self) -> int:
        """Attempts beyond the first one."""
        return max(self.attempts - 1, 0)
