"""API v1 router configuration."""

from fastapi import APIRouter

from .endpoints import admin, completions, health

# Create v1 API router
v1_router = APIRouter(
    prefix="/api/v1",
    tags=["v1"],
    responses={
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
    },
)

# Include all endpoint routers
v1_router.include_router(completions.router, prefix="/completions", tags=["completions"])
v1_router.include_router(health.router, prefix="/health", tags=["health"])
v1_router.include_router(admin.router, prefix="/admin", tags=["admin"])

__all__ = [
    "v1_router",
]
