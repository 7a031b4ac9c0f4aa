"""
Retry with exponential backoff and jitter.

Only exceptions listed in `exceptions` whose `retryable` attribute is not
False are retried. The delay before retry number n (0-based) is
``min(initial_delay * 2**n, max_delay) + uniform(0, jitter)``.
"""

# Standard library imports
import logging
import random
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

# Local application imports
from .scheduler import AsyncioScheduler, Scheduler

logger = logging.getLogger(__name__)

T = TypeVar("T")


def backoff_delay(
    attempt: int,
    initial_delay: float,
    max_delay: float,
    jitter: float,
    random_fn: Callable[[float, float], float] = random.uniform,
) -> float:
    """Delay before retry `attempt` (0 for the first retry)."""
    delay = min(initial_delay * (2 ** attempt), max_delay)
    if jitter > 0:
        delay += random_fn(0, jitter)
    return delay


async def retry_with_backoff(
    func: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 30.0,
    jitter: float = 1.0,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    scheduler: Optional[Scheduler] = None,
    random_fn: Callable[[float, float], float] = random.uniform,
    on_retry: Optional[Callable[[int, BaseException, float], None]] = None,
    description: str = "",
) -> T:
    """
    Call `func` until it succeeds, retrying matching errors up to max_retries times.

    Args:
        func: Zero-argument coroutine function to call
        max_retries: Retries after the first attempt (total attempts = max_retries + 1)
        initial_delay: Delay before the first retry (seconds)
        max_delay: Cap of the exponential part of the delay (seconds)
        jitter: Upper bound of the random delay added to every retry (seconds)
        exceptions: Exception types that may be retried
        scheduler: Where delays are waited on (defaults to the event loop)
        random_fn: Jitter source, uniform(a, b)
        on_retry: Called with (retry number, error, delay) before each wait
        description: Label used in log messages

    Returns:
        The result of the first successful call

    Raises:
        The last error once retries are exhausted, or any non-retryable error at once
    """
    scheduler = scheduler or AsyncioScheduler()
    label = description or getattr(func, "__name__", "operation")

    attempt = 0
    while True:
        try:
            return await func()
        except exceptions as e:
            if getattr(e, "retryable", True) is False:
                raise
            if attempt >= max_retries:
                logger.error(f"{label}: All {max_retries + 1} attempts failed. Last error: {e}")
                raise

            delay = backoff_delay(attempt, initial_delay, max_delay, jitter, random_fn)
            logger.warning(
                f"{label}: Attempt {attempt + 1}/{max_retries + 1} failed: {e}. "
                f"Retrying in {delay:.2f}s..."
            )
            if on_retry is not None:
                on_retry(attempt + 1, e, delay)
            await scheduler.sleep(delay)
            attempt += 1
