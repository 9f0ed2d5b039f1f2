"""
Bounded retry for calls whose reply must be parsed before it is usable.
"""

from typing import Awaitable, Callable, TypeVar

from loguru import logger
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, stop_after_attempt

from .errors import ReplyFormatError
from .timeout import with_timeout

R = TypeVar("R")
T = TypeVar("T")


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Reply rejected, retrying",
        attempt=retry_state.attempt_number,
        error=str(exc),
    )


async def call_with_retry(
    operation: Callable[[], Awaitable[R]],
    parse: Callable[[R], T],
    *,
    max_attempts: int,
    timeout_ms: int,
    timeout_message: str,
) -> T:
    """
    Run `operation` and feed its reply to `parse`, up to `max_attempts` times.

    Every attempt gets a fresh deadline of `timeout_ms`. Only ReplyFormatError
    raised by `parse` triggers another attempt; timeouts and errors from the
    operation itself propagate immediately. When every attempt is rejected the
    last ReplyFormatError is re-raised.
    """
    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        retry=retry_if_exception_type(ReplyFormatError),
        before_sleep=_log_retry,
        reraise=True,
    ):
        with attempt:
            reply = await with_timeout(operation(), timeout_ms, timeout_message)
            return parse(reply)
