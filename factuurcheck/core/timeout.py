import asyncio
from typing import Awaitable, TypeVar

from .errors import OperationTimeoutError

T = TypeVar("T")


async def with_timeout(operation: Awaitable[T], timeout_ms: int, message: str) -> T:
    """
    Await `operation`, giving up after `timeout_ms` milliseconds.

    On timeout an OperationTimeoutError carrying `message` is raised. The
    operation itself is shielded and keeps running in the background; only the
    wait is abandoned. Failures raised by the operation before the deadline
    propagate unchanged.

    Args:
        operation: Coroutine, task or future to wait for
        timeout_ms: Deadline in milliseconds
        message: Message for the timeout error

    Returns:
        Whatever the operation returns
    """
    task = asyncio.ensure_future(operation)
    try:
        return await asyncio.wait_for(asyncio.shield(task), timeout_ms / 1000)
    except asyncio.TimeoutError:
        # Retrieve a late failure so asyncio doesn't report it as never retrieved
        task.add_done_callback(_consume_result)
        raise OperationTimeoutError(message) from None


def _consume_result(task: asyncio.Future) -> None:
    if not task.cancelled():
        task.exception()
