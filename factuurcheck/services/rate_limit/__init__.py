"""
Per-client request limits for the invoice check endpoint.
"""
from loguru import logger

from ...core.config import Settings
from .base import RateLimiterBase, RateLimitResult, now_ms
from .disabled import DisabledRateLimiter
from .memory import InMemoryRateLimiter
from .redis_store import RedisRateLimiter


def create_rate_limiter(settings: Settings) -> RateLimiterBase:
    """
    Pick the limiter backend from configuration.

    Redis when RATE_LIMIT_REDIS_URL/TOKEN are set, the in-memory store when
    RATE_LIMIT_IN_MEMORY is true, otherwise the permissive fallback.
    """
    limits = {"limit": settings.rate_limit_requests, "window_ms": settings.rate_limit_window_ms}

    if settings.redis_configured:
        logger.info("Using Redis rate limiter", **limits)
        return RedisRateLimiter.from_url(
            settings.rate_limit_redis_url, settings.rate_limit_redis_token, **limits
        )
    if settings.rate_limit_in_memory:
        logger.info("Using in-memory rate limiter", **limits)
        return InMemoryRateLimiter(**limits)

    logger.warning("Rate limiting disabled: RATE_LIMIT_REDIS_URL not configured")
    return DisabledRateLimiter(**limits)


def get_rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    """Rate limit response headers. The reset value is epoch milliseconds."""
    return {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(result.reset),
    }


def limiter_mode(limiter: RateLimiterBase) -> str:
    if isinstance(limiter, RedisRateLimiter):
        return "redis"
    if isinstance(limiter, InMemoryRateLimiter):
        return "memory"
    return "disabled"


__all__ = [
    "RateLimiterBase",
    "RateLimitResult",
    "DisabledRateLimiter",
    "InMemoryRateLimiter",
    "RedisRateLimiter",
    "create_rate_limiter",
    "get_rate_limit_headers",
    "limiter_mode",
    "now_ms",
]
