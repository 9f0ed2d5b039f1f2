from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from ..core.logging import setup_logging
from ..core.config import settings
from ..services.rate_limit import create_rate_limiter
from .routers import check, health

logger = setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The rate limiter (and the in-memory eviction task) lives as long as the app
    app.state.rate_limiter = create_rate_limiter(settings)
    await app.state.rate_limiter.start()
    try:
        yield
    finally:
        await app.state.rate_limiter.stop()


app = FastAPI(title="Factuurcheck", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error("Validation error", errors=str(exc.errors()))
    return JSONResponse(
        status_code=422,
        content={"error": "Ongeldig verzoek", "detail": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]


# CORS_ORIGINS can be set in .env as comma-separated list
# Example: CORS_ORIGINS=http://localhost:3000,https://your-frontend.com
allowed_origins = [origin.strip() for origin in settings.cors_origins.split(",")]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset"],
)

app.include_router(health.router)
app.include_router(check.router)
