"""
Abstract base class for rate limiter implementations.

Defines the interface every backend implements so the request handler can be
given any of them through dependency injection.
"""

import time
from abc import ABC, abstractmethod
from typing import Callable

from pydantic import BaseModel


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class RateLimitResult(BaseModel):
    """Outcome of a rate limit check. `reset` is in epoch milliseconds."""
    allowed: bool
    limit: int
    remaining: int
    reset: int


class RateLimiterBase(ABC):
    """
    Abstract base class for rate limiting.

    Implementations:
    - Disabled (no backend configured, allows everything)
    - In-memory sliding window (single process)
    - Redis sliding window (shared across instances)
    """

    def __init__(self, limit: int = 10, window_ms: int = 60_000, clock: Callable[[], int] = now_ms):
        self.limit = limit
        self.window_ms = window_ms
        self._clock = clock

    @abstractmethod
    async def check(self, identifier: str) -> RateLimitResult:
        """
        Count one request for `identifier` and decide whether it is allowed.

        Args:
            identifier: Caller identity (client IP or "anonymous")

        Returns:
            RateLimitResult for this request
        """
        pass

    async def start(self) -> None:
        """Acquire resources / start background work. Called on app startup."""

    async def stop(self) -> None:
        """Release resources. Called on app shutdown."""
