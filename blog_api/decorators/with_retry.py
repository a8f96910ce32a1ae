"""Exponential-backoff retries for flaky async operations, built on tenacity."""

from collections.abc import Awaitable, Callable
from logging import getLogger

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from blog_api.configs import file_logger

logger = file_logger(getLogger(__name__))

type AsyncFunc[**P, T] = Callable[P, Awaitable[T]]

TRANSIENT_ERRORS: tuple[type[Exception], ...] = (ConnectionError, TimeoutError)


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
    name = getattr(retry_state.fn, "__qualname__", "operation")
    logger.warning(
        f"{name} failed on attempt {retry_state.attempt_number} ({error!r}); "
        f"retrying in {delay:.2f}s",
    )


def with_retry[**P, T](
    retry_on: type[Exception] | tuple[type[Exception], ...] = TRANSIENT_ERRORS,
    attempts: int = 3,
    base_delay: float = 0.1,
    max_delay: float = 2.0,
) -> Callable[[AsyncFunc[P, T]], AsyncFunc[P, T]]:
    """
    Retry a coroutine function when it raises one of ``retry_on``.

    The last error is re-raised unchanged once ``attempts`` are used up, so
    callers see the same exception type with or without the decorator.

    Args:
        retry_on: Exception type(s) worth retrying
        attempts: Total number of calls, including the first
        base_delay: Delay before the first retry, in seconds; doubles each time
        max_delay: Upper bound on a single delay, in seconds

    Returns:
        Decorator applying the retry policy
    """
    return retry(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=base_delay, min=base_delay, max=max_delay),
        retry=retry_if_exception_type(retry_on),
        before_sleep=_log_retry,
        reraise=True,
    )
