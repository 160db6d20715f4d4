"""
FastAPI application factory.
"""

import time
import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from seer import __version__
from seer.api.dependencies import (
    cleanup_dependencies,
    get_database,
    get_scheduler,
    get_source_registry,
)
from seer.api.middleware.timeout import TimeoutMiddleware
from seer.api.routes import health, opportunities, reports, sources
from seer.config.settings import get_settings
from seer.errors import SeerError
from seer.storage.schema import create_all_tables

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Seer API starting up")
    settings = get_settings()

    db = await get_database()
    await create_all_tables(db)

    registry = await get_source_registry()
    seeded = await registry.ensure_seeded()
    if seeded:
        logger.info("Built-in sources seeded", count=seeded)

    if settings.scheduler_enabled:
        scheduler = await get_scheduler()
        await scheduler.start()

    yield

    logger.info("Seer API shutting down")
    await cleanup_dependencies()


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    openapi_tags = [
        {"name": "health", "description": "Service health checks"},
        {"name": "opportunities", "description": "Scored, deduplicated opportunities"},
        {"name": "sources", "description": "Source registry and manual fetch"},
        {"name": "reports", "description": "Windowed reports and LLM prompts"},
    ]

    app = FastAPI(
        title="Seer API",
        description="""
Opportunity discovery for independent developers.

Seer polls Hacker News, GitHub, npm, DEV.to and user-registered RSS feeds,
scores each item against configurable signal rules, stores first sightings
and produces periodic reports with an optional AI analysis.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=openapi_tags,
    )

    # Add CORS middleware (origins from CORS_ORIGINS env var, comma-separated)
    cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Request timeout middleware (must be added before logging middleware
    # so timeout wraps the entire request lifecycle)
    if settings.request_timeout_seconds > 0:
        app.add_middleware(
            TimeoutMiddleware,
            timeout_seconds=settings.request_timeout_seconds,
        )

    # Request logging and correlation ID
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-Correlation-ID")
            or str(uuid.uuid4())
        )
        structlog.contextvars.bind_contextvars(request_id=request_id)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time
            response.headers["X-Request-ID"] = request_id

            logger.info(
                "HTTP request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()

    @app.exception_handler(SeerError)
    async def seer_error_handler(request: Request, exc: SeerError):
        if exc.status_code >= 500:
            logger.error("Request failed", error_type=exc.code, detail=exc.message)
        else:
            logger.info("Request rejected", error_type=exc.code, detail=exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "error_type": exc.code},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={
                "detail": _format_validation_errors(exc),
                "error_type": "validation_error",
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "error_type": "internal"},
        )

    # Include routers
    app.include_router(health.router, tags=["health"])
    app.include_router(health.router, prefix="/api", tags=["health"], include_in_schema=False)
    app.include_router(opportunities.router, prefix="/api", tags=["opportunities"])
    app.include_router(sources.router, prefix="/api", tags=["sources"])
    app.include_router(reports.router, prefix="/api/reports", tags=["reports"])
    app.include_router(
        reports.router,
        prefix="/api/prompts",
        tags=["reports"],
        include_in_schema=False,
    )

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "service": "Seer API",
            "version": __version__,
            "docs": "/docs",
        }

    return app
