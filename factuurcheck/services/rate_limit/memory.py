"""
In-memory sliding window rate limiter (for single-process deployments).
With multiple instances, use the Redis limiter instead.
"""
import asyncio
import contextlib
from collections import deque
from typing import Callable, Dict, Deque, Optional

from loguru import logger

from .base import RateLimiterBase, RateLimitResult, now_ms


class InMemoryRateLimiter(RateLimiterBase):
    def __init__(
        self,
        limit: int = 10,
        window_ms: int = 60_000,
        cleanup_interval_s: float = 300,
        clock: Callable[[], int] = now_ms,
    ):
        super().__init__(limit=limit, window_ms=window_ms, clock=clock)
        self.cleanup_interval_s = cleanup_interval_s
        self._hits: Dict[str, Deque[int]] = {}
        self._lock = asyncio.Lock()
        self._cleanup_task: Optional[asyncio.Task] = None

    async def check(self, identifier: str) -> RateLimitResult:
        async with self._lock:
            now = self._clock()
            hits = self._hits.setdefault(identifier, deque())
            while hits and hits[0] <= now - self.window_ms:
                hits.popleft()

            if len(hits) >= self.limit:
                logger.info("Rate limit exceeded", identifier=identifier, limit=self.limit)
                return RateLimitResult(
                    allowed=False,
                    limit=self.limit,
                    remaining=0,
                    reset=hits[0] + self.window_ms,
                )

            hits.append(now)
            return RateLimitResult(
                allowed=True,
                limit=self.limit,
                remaining=self.limit - len(hits),
                reset=hits[0] + self.window_ms,
            )

    def evict_expired(self) -> int:
        """Drop identifiers whose newest hit has left the window. Returns how many."""
        cutoff = self._clock() - self.window_ms
        expired = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in expired:
            del self._hits[key]
        return len(expired)

    async def _cleanup_loop(self) -> None:
        while True:
            await asyncio.sleep(self.cleanup_interval_s)
            async with self._lock:
                evicted = self.evict_expired()
            if evicted:
                logger.debug("Evicted expired rate limit entries", count=evicted)

    async def start(self) -> None:
        if self._cleanup_task is None:
            self._cleanup_task = asyncio.create_task(self._cleanup_loop())

    async def stop(self) -> None:
        if self._cleanup_task is not None:
            self._cleanup_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._cleanup_task
            self._cleanup_task = None

    def __len__(self) -> int:
        return len(self._hits)
