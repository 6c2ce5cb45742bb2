"""FastAPI application entry point."""

import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError as FastAPIValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tickrtime import __version__
from tickrtime.api import api_router
from tickrtime.config import get_settings
from tickrtime.core.dependencies import RedisDep
from tickrtime.core.exceptions import (
    AuthError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    RequestValidationError,
    TickrTimeError,
)
from tickrtime.core.logging import get_logger, setup_logging
from tickrtime.processing.tickers import TickerSyncer
from tickrtime.providers.finnhub import FinnhubClient
from tickrtime.scheduler import create_scheduler, schedule_ticker_sync
from tickrtime.storage.redis import close_redis, init_redis
from tickrtime.storage.tickers import TickerStore

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: connect Redis and Finnhub, start the scheduler."""
    settings = get_settings()
    setup_logging(settings)

    redis = await init_redis(settings.redis_url)
    api_key = settings.finnhub_api_key.get_secret_value() if settings.finnhub_api_key else None
    finnhub = FinnhubClient(
        api_key=api_key,
        base_url=settings.finnhub_api_url,
        timeout=settings.finnhub_timeout,
        max_concurrency=settings.finnhub_max_concurrency,
    )
    if not finnhub.is_configured:
        logger.warning("FINNHUB_API_KEY not set, earnings endpoints will return errors")

    scheduler = None
    if settings.ticker_sync_enabled and finnhub.is_configured:
        scheduler = create_scheduler()
        syncer = TickerSyncer(
            finnhub,
            TickerStore(redis),
            enrichment_batch_size=settings.ticker_enrichment_batch_size,
            enrichment_delay=settings.ticker_enrichment_delay,
        )
        schedule_ticker_sync(scheduler, syncer, settings.ticker_sync_hour)
        scheduler.start()

    app.state.redis = redis
    app.state.finnhub = finnhub
    app.state.scheduler = scheduler
    logger.info("TickrTime ready", env=settings.env, scheduler_enabled=scheduler is not None)

    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.shutdown(wait=False)
        await finnhub.close()
        await close_redis(redis)
        logger.info("TickrTime stopped")


app = FastAPI(
    title="TickrTime",
    description="Earnings calendar API for NASDAQ and NYSE listed companies",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    started = time.monotonic()
    response = await call_next(request)
    logger.info(
        "Request handled",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        duration_ms=round((time.monotonic() - started) * 1000, 1),
    )
    return response


# Error responses

_STATUS_BY_ERROR: dict[type[TickrTimeError], int] = {
    RequestValidationError: 400,
    AuthError: 401,
    NotFoundError: 404,
    ConflictError: 409,
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(TickrTimeError)
async def handle_domain_error(request: Request, exc: TickrTimeError) -> JSONResponse:
    for error_type, status_code in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return _error(status_code, exc.message)
    if isinstance(exc, ConfigurationError):
        return _error(500, "API configuration error")
    logger.error(
        "Request failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=exc.message,
    )
    return _error(500, "Internal server error")


@app.exception_handler(FastAPIValidationError)
async def handle_validation_error(request: Request, exc: FastAPIValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return _error(400, message)


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return _error(404, "Not found")
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path)
    return _error(500, "Internal server error")


# Infrastructure (no prefix)


@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness check, always ok if process is running."""
    return {"status": "ok"}


@app.get("/ready")
async def ready(request: Request, redis: RedisDep) -> dict[str, str]:
    """Readiness check, verifies infrastructure is connected."""
    checks: dict[str, str] = {}
    try:
        await redis.ping()  # type: ignore[misc]
        checks["redis"] = "ok"
    except Exception:
        checks["redis"] = "error"
    checks["finnhub"] = "ok" if request.app.state.finnhub.is_configured else "not_configured"
    scheduler = request.app.state.scheduler
    checks["scheduler"] = "ok" if scheduler and scheduler.running else "disabled"
    status = "ready" if all(v != "error" for v in checks.values()) else "not_ready"
    return {"status": status, **checks}


# Domain API
app.include_router(api_router, prefix="/api")
