"""FastAPI application factory with lifespan management and dependency injection."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import Depends, FastAPI
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST

from ..core.config import Settings
from ..core.container import create_container
from ..infrastructure.monitoring import MetricsCollector
from .api.dependencies import get_metrics_collector
from .api.v1 import v1_router
from .middleware import RequestIDMiddleware

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan events with startup and shutdown logic.

    Args:
        app: FastAPI application instance

    Yields:
        None during application lifetime
    """
    settings: Settings = app.state.settings

    logger.info(
        "Starting Completion Dispatch API",
        app_name=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT.value,
        providers=[provider.value for provider in settings.PROVIDER_PRIORITY],
        candidates=settings.candidate_count,
    )

    yield

    logger.info("Shutting down Completion Dispatch API")

    container = app.state.container
    recorder = container.usage_recorder()
    if recorder.pending():
        logger.warning("Unflushed usage records discarded at shutdown", records=len(recorder.pending()))

    for client in container.provider_clients().values():
        await client.aclose()

    logger.info("Application shutdown completed successfully")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        settings: Application settings (optional, read from the environment if None)

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = Settings()

    settings.setup_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Prompt completion with retry and fallback across LLM providers",
        debug=settings.DEBUG,
        docs_url="/docs" if settings.ENVIRONMENT.value != "production" else None,
        redoc_url="/redoc" if settings.ENVIRONMENT.value != "production" else None,
        openapi_url="/openapi.json" if settings.ENVIRONMENT.value != "production" else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.container = create_container(settings)

    app.add_middleware(RequestIDMiddleware)

    app.include_router(v1_router)

    @app.get("/metrics", include_in_schema=False)
    async def metrics(collector: MetricsCollector = Depends(get_metrics_collector)) -> PlainTextResponse:
        """Prometheus exposition."""
        return PlainTextResponse(collector.get_prometheus_metrics(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint returning basic API information."""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT.value,
            "status": "online",
            "docs": "/docs",
        }

    return app
