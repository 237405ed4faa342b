"""
Retry with exponential backoff for backend calls.

Only transient transport failures are retried; HTTP error statuses are
classified separately so callers can decide whether a response is worth
asking for again.
"""

import functools
import time
from typing import Callable, Optional, Tuple, Type


class RetryError(Exception):
    """Raised when all retry attempts are exhausted."""
    pass


def exponential_backoff(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    exponential_base: float = 2.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    on_retry: Optional[Callable] = None,
):
    """
    Decorator retrying a call with exponentially growing delays.

    Args:
        max_retries: Retry attempts after the first call (0 = no retries)
        base_delay: Delay before the first retry, in seconds
        max_delay: Upper bound for any single delay
        exponential_base: Factor applied to the delay after each retry
        exceptions: Exception types that trigger a retry
        on_retry: Optional callback(attempt, exception, delay)

    Example:
        @exponential_backoff(max_retries=2, exceptions=(requests.Timeout,))
        def fetch_posts(session):
            return session.get(url)
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            delay = base_delay
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt >= max_retries:
                        raise RetryError(
                            f"Failed after {max_retries + 1} attempts: {e}"
                        ) from e
                    current_delay = min(delay, max_delay)
                    if on_retry:
                        on_retry(attempt + 1, e, current_delay)
                    time.sleep(current_delay)
                    delay *= exponential_base
        return wrapper
    return decorator


RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


def should_retry_http_status(status_code: int) -> bool:
    """True for timeouts, rate limiting and gateway/server errors."""
    return status_code in RETRYABLE_STATUS_CODES


def is_transient_error(exception: Exception) -> bool:
    """
    Guess whether an exception is transient from its message.

    Used when only the error text survives (e.g. a wrapped RetryError).
    """
    error_str = str(exception).lower()
    transient_keywords = (
        "timeout",
        "timed out",
        "connection",
        "temporary failure",
        "service unavailable",
        "429",
        "502",
        "503",
        "504",
    )
    return any(keyword in error_str for keyword in transient_keywords)
