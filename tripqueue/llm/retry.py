# tripqueue/llm/retry.py
"""Retry policy for generation calls: exponential backoff plus jitter."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from tripqueue.errors import GenerationHTTPError

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


def is_retryable(exception: BaseException) -> bool:
    """
    Returns True if the exception should be retried.

    Retryable conditions:
    - GenerationHTTPError with status 429 or any 5xx
    - Network-level failures (httpx transport errors, ConnectionError)

    Cancellation is never retried; it is a BaseException and fails the check.
    """
    if isinstance(exception, GenerationHTTPError):
        return exception.status_code == 429 or exception.status_code >= 500

    return isinstance(exception, (httpx.TransportError, ConnectionError))


def generation_retrying(
    retries: int = 3,
    base_delay: float = 0.5,
    factor: float = 2.0,
    sleep: SleepFn = asyncio.sleep,
) -> AsyncRetrying:
    """
    Build the tenacity controller for one generation call.

    The n-th retry waits ``base_delay * factor ** (n - 1)`` plus a uniform
    jitter in ``[0, base_delay)``.

    Args:
        retries:    Extra attempts after the first one
        base_delay: Base delay in seconds, also the jitter bound
        factor:     Exponential growth factor
        sleep:      Sleep coroutine (injectable for tests)
    """
    return AsyncRetrying(
        stop=stop_after_attempt(retries + 1),
        wait=wait_exponential(multiplier=base_delay, exp_base=factor)
        + wait_random(0, base_delay),
        retry=retry_if_exception(is_retryable),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        sleep=sleep,
        reraise=True,
    )
