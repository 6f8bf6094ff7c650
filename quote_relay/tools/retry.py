"""Retry utilities with a pluggable backoff schedule."""
import logging
import time
from functools import wraps
from typing import Any, Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryExhaustedError(Exception):
    def __init__(self, attempts: int, last_exception: BaseException):
        super().__init__(f"gave up after {attempts} attempt(s): {last_exception}")
        self.attempts = attempts
        self.last_exception = last_exception


def linear_backoff(step: float = 1.0) -> Callable[[int], float]:
    """Delay of ``attempt * step`` seconds after the given failed attempt (1-based)."""

    def delay(attempt: int) -> float:
        return attempt * step

    return delay


def retry_with_backoff(
    max_attempts: int = 3,
    delay: Callable[[int], float] = linear_backoff(1.0),
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
):
    """
    Decorator that retries a call on the given exception types.

    Args:
        max_attempts: Total number of calls before giving up (at least 1)
        delay: Maps the number of the attempt that just failed to a wait in seconds
        retry_on: Exception types that trigger another attempt; anything else propagates
        sleep: Wait function, injectable for tests

    Raises RetryExhaustedError once every attempt has failed.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        name = getattr(func, "__name__", repr(func))

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            last_exception: BaseException | None = None

            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except retry_on as e:
                    last_exception = e
                    if attempt < max_attempts:
                        wait = delay(attempt)
                        logger.warning(
                            "%s failed (attempt %d/%d): %s. Retrying in %.1f seconds...",
                            name,
                            attempt,
                            max_attempts,
                            e,
                            wait,
                        )
                        sleep(wait)
                    else:
                        logger.error("%s failed after %d attempts: %s", name, max_attempts, e)

            raise RetryExhaustedError(max_attempts, last_exception)

        return wrapper

    return decorator
