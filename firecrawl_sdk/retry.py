"""
Retry policy for transient API failures.

The policy decides which HTTP statuses are worth another attempt and how long
to wait before it. Delays grow exponentially from the backoff factor, without
jitter and without a cap.
"""

import asyncio

# Statuses below 500 that are still transient
RETRYABLE_CLIENT_STATUSES = frozenset({408, 409})


class RetryPolicy:
    """
    Exponential backoff retry policy.

    Attempt numbers are 1-indexed retries: attempt 1 is the first retry after
    the initial request failed.
    """

    def __init__(self, max_retries: int = 3, backoff_factor: float = 0.5):
        """
        Initialize the retry policy.

        Args:
            max_retries: Maximum number of retries beyond the first attempt.
            backoff_factor: Delay before the first retry, in seconds; doubles on each retry.
        """
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if backoff_factor < 0:
            raise ValueError("backoff_factor must be >= 0")
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor

    @staticmethod
    def is_retryable_status(status: int) -> bool:
        """Whether an HTTP status denotes a transient failure (408, 409, 5xx)."""
        return status in RETRYABLE_CLIENT_STATUSES or 500 <= status < 600

    def should_retry(self, attempt: int) -> bool:
        """
        Whether another retry is allowed.

        Args:
            attempt: Number of retries already made.
        """
        return attempt < self.max_retries

    def compute_delay(self, attempt: int) -> float:
        """
        Delay before a retry, ``backoff_factor * 2 ** (attempt - 1)``.

        Args:
            attempt: The retry about to be made (1-indexed).

        Returns:
            Delay in seconds.
        """
        if attempt < 1:
            raise ValueError("attempt is 1-indexed")
        return self.backoff_factor * (2 ** (attempt - 1))

    async def wait(self, attempt: int) -> float:
        """
        Sleep before a retry. Cancelling the calling task interrupts the sleep.

        Returns:
            The delay that was waited.
        """
        delay = self.compute_delay(attempt)
        await asyncio.sleep(delay)
        return delay
