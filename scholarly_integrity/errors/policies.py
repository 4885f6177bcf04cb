"""RetryPolicy configurations for external source lookups.

External lookups are the only unreliable calls the engine makes. They are
retried with exponential backoff, always inside the per-source deadline
that the caller configures.
"""

import logging
import random
from dataclasses import dataclass

from scholarly_integrity.errors.exceptions import SourceLookupError

logger = logging.getLogger(__name__)


# =============================================================================
# RetryPolicy
# =============================================================================


@dataclass(frozen=True)
class RetryPolicy:
    """Backoff schedule and retry decision for one kind of call.

    Attributes:
        max_attempts: Attempts including the first one
        initial_interval: Delay before the first retry, in seconds
        backoff_factor: Multiplier applied per further retry
        max_interval: Upper bound on a single delay, in seconds
        jitter: Add up to 50% random jitter to each delay
        retryable: Exception types worth another attempt
    """

    max_attempts: int = 3
    initial_interval: float = 0.05
    backoff_factor: float = 2.0
    max_interval: float = 1.0
    jitter: bool = False
    retryable: tuple[type[BaseException], ...] = (SourceLookupError, ConnectionError)

    def get_delay(self, attempt: int, remaining: float | None = None) -> float:
        """Delay before the retry that follows `attempt` (0-indexed).

        Args:
            attempt: The attempt that just failed
            remaining: Seconds left before the deadline; caps the delay

        Returns:
            Delay in seconds, never negative
        """
        delay = min(
            self.initial_interval * (self.backoff_factor ** attempt),
            self.max_interval,
        )
        if self.jitter:
            delay *= 1 + random.random() * 0.5
        if remaining is not None:
            delay = min(delay, remaining)
        return max(delay, 0.0)

    def is_retryable(self, error: BaseException) -> bool:
        """Whether an error is worth another attempt at all.

        Lookup errors flagged as non-transient never are.
        """
        if isinstance(error, SourceLookupError) and not error.transient:
            return False
        return isinstance(error, self.retryable)

    def should_attempt_retry(self, error: BaseException, attempt: int) -> bool:
        """Whether to retry after `attempt` (0-indexed) failed with `error`."""
        if attempt >= self.max_attempts - 1:
            return False
        if not self.is_retryable(error):
            logger.debug(f"{error.__class__.__name__} is not retryable")
            return False
        return True


# =============================================================================
# Pre-configured Policies
# =============================================================================


def create_lookup_retry_policy(
    max_attempts: int = 3,
    initial_interval: float = 0.05,
) -> RetryPolicy:
    """Create the retry policy for external source lookups.

    Delays are short because the whole retry chain shares one per-source
    deadline.

    Args:
        max_attempts: Maximum attempts
        initial_interval: Initial delay in seconds
    """
    return RetryPolicy(max_attempts=max_attempts, initial_interval=initial_interval)


NO_RETRY_POLICY = RetryPolicy(max_attempts=1)
"""Single attempt, no retries."""
