"""core.retry

Opt-in retry utilities with exponential back-off + optional jitter.

The provider's default strategy is a single attempt, so nothing is retried
unless the host asks for it. When the attempts run out the last vendor error
is re-raised unchanged, keeping the error taxonomy intact for callers.
"""

from __future__ import annotations

import functools
import logging
import secrets
import time
from typing import TYPE_CHECKING, ParamSpec, TypeVar

from pydantic import BaseModel, Field

from deepseek_bridge.core.exceptions import RateLimitExceededError, ServerError

if TYPE_CHECKING:
    from collections.abc import Callable

P = ParamSpec('P')
T = TypeVar('T')

logger = logging.getLogger(__name__)

#: Errors worth another attempt; authentication and malformed bodies are not.
DEFAULT_RETRY_ON: tuple[type[Exception], ...] = (RateLimitExceededError, ServerError)


class RetryStrategy(BaseModel):
    """Configuration for exponential back-off retry with optional jitter."""

    max_attempts: int = Field(default=1, ge=1, description='Total attempts including the first call')
    base_backoff_sec: float = Field(default=1.0, ge=0.0, description='Initial delay before first retry (seconds)')
    max_backoff_sec: float = Field(default=60.0, ge=0.0, description='Upper bound for any sleep interval')
    jitter: bool = Field(default=True, description='Add random jitter (0-1s) to each interval')

    model_config = {
        'frozen': True,
    }

    def compute_delay(self, attempt_number: int) -> float:
        """Calculate sleep duration for the given attempt number (1-indexed)."""
        delay = min(self.base_backoff_sec * (2 ** (attempt_number - 1)), self.max_backoff_sec)

        if self.jitter:
            # Random value between 0 and 1
            delay += secrets.randbelow(101) / 100

        return delay


def with_retry(
    strategy: RetryStrategy | None = None,
    retry_on: tuple[type[Exception], ...] | None = None,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Retry decorator that retries a function according to the specified strategy.

    Parameters
    ----------
    strategy
        Retry policy. Defaults to RetryStrategy() (a single attempt) if None.
    retry_on
        Exception types that trigger a retry. Defaults to
        (RateLimitExceededError, ServerError).

    """
    retry_strategy = strategy or RetryStrategy()
    retry_exceptions = retry_on or DEFAULT_RETRY_ON

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            attempt_number = 1
            while True:
                try:
                    return func(*args, **kwargs)
                except retry_exceptions as exc:
                    if attempt_number >= retry_strategy.max_attempts:
                        raise
                    delay = retry_strategy.compute_delay(attempt_number)
                    logger.debug(
                        'Retrying after %s (attempt %d/%d, sleeping %.2fs)',
                        type(exc).__name__,
                        attempt_number,
                        retry_strategy.max_attempts,
                        delay,
                    )
                    time.sleep(delay)
                    attempt_number += 1

        return wrapper

    return decorator
