from loguru import logger

from .base import RateLimiterBase, RateLimitResult


class DisabledRateLimiter(RateLimiterBase):
    """Used when no rate limit backend is configured: never blocks a request."""

    async def check(self, identifier: str) -> RateLimitResult:
        logger.warning("Rate limiting disabled: RATE_LIMIT_REDIS_URL not configured")
        return RateLimitResult(
            allowed=True,
            limit=self.limit,
            remaining=self.limit,
            reset=self._clock() + self.window_ms,
        )
