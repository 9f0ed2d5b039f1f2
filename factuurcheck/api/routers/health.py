from datetime import datetime, UTC

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ...core.config import settings
from ...services.rate_limit import limiter_mode

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health(request: Request):
    """
    Report which configuration is present and well-formed, without exposing
    any values.

    Returns 200 "healthy" when nothing required is missing, else 500.
    """
    limiter = getattr(request.app.state, "rate_limiter", None)
    checks = {
        "AZ_DI_ENDPOINT": bool(settings.az_di_endpoint),
        "AZ_DI_ENDPOINT_IS_HTTPS": (settings.az_di_endpoint or "").startswith("https://"),
        "AZ_DI_API_KEY": bool(settings.az_di_api_key),
        "LLM_API_KEY": bool(settings.llm_api_key),
        "LLM_BASE_URL": bool(settings.llm_base_url),
        "RATE_LIMIT_REDIS_URL": bool(settings.rate_limit_redis_url),
        "RATE_LIMIT_REDIS_TOKEN": bool(settings.rate_limit_redis_token),
    }

    issues = []
    if not checks["AZ_DI_ENDPOINT"]:
        issues.append("AZ_DI_ENDPOINT is missing")
    elif not checks["AZ_DI_ENDPOINT_IS_HTTPS"]:
        issues.append("AZ_DI_ENDPOINT must start with https://")
    if not checks["AZ_DI_API_KEY"]:
        issues.append("AZ_DI_API_KEY is missing")
    if not checks["LLM_API_KEY"]:
        issues.append("LLM_API_KEY is missing")

    healthy = not issues
    return JSONResponse(
        status_code=200 if healthy else 500,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "environment": settings.app_env,
            "rateLimiter": limiter_mode(limiter) if limiter is not None else "not started",
            "checks": checks,
            "issues": issues,
        },
    )
