"""Application entry points."""

import uvicorn
from fastapi import FastAPI

from .core.config import Settings
from .presentation.app import create_app


def get_application(settings: Settings | None = None) -> FastAPI:
    """Get configured FastAPI application instance."""
    return create_app(settings)


def run_development_server(host: str = "127.0.0.1", port: int = 8000, reload: bool = False, log_level: str = "info") -> None:
    """Run the API with uvicorn using the app factory."""
    uvicorn.run(
        "completion_dispatch.main:get_application",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
        access_log=True,
    )
