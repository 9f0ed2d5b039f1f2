"""
Redis-backed sliding window rate limiter.

Each identifier maps to a sorted set of request timestamps. Pruning, adding
and counting run in one MULTI/EXEC transaction so concurrent requests from
several app instances see a consistent count.
"""

import uuid
from typing import Callable

from loguru import logger
from redis.asyncio import Redis

from .base import RateLimiterBase, RateLimitResult, now_ms


class RedisRateLimiter(RateLimiterBase):
    """
    Sliding window limiter on a shared Redis (e.g. Upstash over TLS).

    Rejected requests remove their own entry again, so hammering a limited
    identifier does not push its reset time further out.
    """

    def __init__(
        self,
        redis: Redis,
        limit: int = 10,
        window_ms: int = 60_000,
        prefix: str = "factuurcheck:ratelimit",
        clock: Callable[[], int] = now_ms,
    ):
        super().__init__(limit=limit, window_ms=window_ms, clock=clock)
        self.redis = redis
        self.prefix = prefix

    @classmethod
    def from_url(cls, url: str, token: str, **kwargs) -> "RedisRateLimiter":
        return cls(Redis.from_url(url, password=token), **kwargs)

    async def check(self, identifier: str) -> RateLimitResult:
        now = self._clock()
        key = f"{self.prefix}:{identifier}"
        member = f"{now}:{uuid.uuid4().hex}"

        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.zremrangebyscore(key, 0, now - self.window_ms)
            pipe.zadd(key, {member: now})
            pipe.zcard(key)
            pipe.zrange(key, 0, 0, withscores=True)
            pipe.pexpire(key, self.window_ms)
            _, _, count, oldest, _ = await pipe.execute()

        oldest_ms = int(oldest[0][1]) if oldest else now
        reset = oldest_ms + self.window_ms

        if count > self.limit:
            await self.redis.zrem(key, member)
            logger.info("Rate limit exceeded", identifier=identifier, limit=self.limit)
            return RateLimitResult(allowed=False, limit=self.limit, remaining=0, reset=reset)

        return RateLimitResult(
            allowed=True,
            limit=self.limit,
            remaining=self.limit - count,
            reset=reset,
        )

    async def stop(self) -> None:
        await self.redis.aclose()
