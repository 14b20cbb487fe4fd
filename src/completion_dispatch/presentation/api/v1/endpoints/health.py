"""Health check API endpoints."""

import time

from fastapi import APIRouter, Depends, status

from .....core.config import Settings
from .....core.container import Container
from .....domain.enums import ProviderId
from ....schemas import HealthResponse
from ...dependencies import get_container, get_settings

router = APIRouter()


@router.get("/", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def basic_health_check(
    settings: Settings = Depends(get_settings),
    container: Container = Depends(get_container),
) -> HealthResponse:
    """Liveness with uptime and the configured provider keys (names only)."""
    secrets = container.secret_source()
    providers = {
        provider.value: {
            "secret": provider.secret_name,
            "configured": secrets.get_secret(provider.secret_name) is not None,
            "in_priority": provider in settings.PROVIDER_PRIORITY,
        }
        for provider in ProviderId
    }

    return HealthResponse(
        status="healthy",
        timestamp=time.time(),
        service="completion-dispatch-api",
        version=settings.APP_VERSION,
        providers=providers,
        system=container.metrics_collector().get_system_stats(),
    )
