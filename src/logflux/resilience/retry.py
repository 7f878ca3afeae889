"""
Retry with capped exponential backoff.

Used by network transports to resend a batch after a transport-level
failure or a server error, while giving up immediately on rejections that
retrying cannot fix.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple, Type

import requests

from logflux.constants import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_BASE_DELAY_SECONDS,
    MAX_RETRY_DELAY_SECONDS,
)
from logflux.exceptions import DeliveryRejectedError, ServerError

logger = logging.getLogger(__name__)


@dataclass
class RetryPolicy:
    """Configuration for retry behavior."""
    max_attempts: int = DEFAULT_MAX_RETRIES + 1
    base_delay: float = DEFAULT_RETRY_BASE_DELAY_SECONDS   # Base delay in seconds
    max_delay: float = MAX_RETRY_DELAY_SECONDS             # Maximum delay in seconds
    multiplier: float = 2.0                                # Exponential multiplier

    retryable_exceptions: Tuple[Type[Exception], ...] = field(
        default_factory=lambda: (requests.RequestException, ServerError)
    )
    non_retryable_exceptions: Tuple[Type[Exception], ...] = field(
        default_factory=lambda: (DeliveryRejectedError,)
    )


class ExponentialBackoffStrategy:
    """Delay of ``base * multiplier ** (attempt - 1)``, capped at ``max_delay``."""

    def __init__(self, multiplier: float = 2.0):
        self.multiplier = multiplier

    def calculate_delay(self, attempt: int, base_delay: float, max_delay: float) -> float:
        """Calculate delay for given attempt number (1-based)."""
        delay = base_delay * (self.multiplier ** (attempt - 1))
        return min(delay, max_delay)


@dataclass
class RetryAttempt:
    """Information about a failed attempt."""
    attempt_number: int
    delay: float
    exception: Optional[Exception]
    total_elapsed: float


class RetryManager:
    """
    Runs a callable under a RetryPolicy.

    ``sleep`` is injectable so callers (and tests) control how waiting
    happens.
    """

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.policy = policy or RetryPolicy()
        self.sleep = sleep
        self.backoff = ExponentialBackoffStrategy(multiplier=self.policy.multiplier)
        self.attempts: List[RetryAttempt] = []

    def execute_with_retry(self, func: Callable, *args, **kwargs) -> Any:
        """
        Execute a function with retry logic.

        Raises:
            The last exception once retries are exhausted, or immediately
            for a non-retryable exception
        """
        start_time = time.monotonic()
        self.attempts = []

        for attempt in range(1, self.policy.max_attempts + 1):
            try:
                result = func(*args, **kwargs)
                if attempt > 1:
                    logger.debug(
                        "%s succeeded after %d attempts", _name(func), attempt
                    )
                return result

            except Exception as e:
                if not self._should_retry(e, attempt):
                    raise

                delay = self._calculate_delay(attempt)
                self.attempts.append(
                    RetryAttempt(
                        attempt_number=attempt,
                        delay=delay,
                        exception=e,
                        total_elapsed=time.monotonic() - start_time,
                    )
                )
                logger.debug(
                    "%s failed (%s), retry %d/%d in %.2fs",
                    _name(func), type(e).__name__, attempt,
                    self.policy.max_attempts - 1, delay,
                )
                if delay > 0:
                    self.sleep(delay)

        raise RuntimeError(f"All retry attempts failed for {_name(func)}")

    def _should_retry(self, exception: Exception, attempt: int) -> bool:
        """Determine if an exception should trigger a retry."""
        if attempt >= self.policy.max_attempts:
            return False

        if isinstance(exception, self.policy.non_retryable_exceptions):
            return False

        return isinstance(exception, self.policy.retryable_exceptions)

    def _calculate_delay(self, attempt: int) -> float:
        return self.backoff.calculate_delay(
            attempt=attempt,
            base_delay=self.policy.base_delay,
            max_delay=self.policy.max_delay,
        )


def _name(func: Callable) -> str:
    return getattr(func, "__name__", repr(func))
