"""FastAPI dependencies resolving components from the application container."""

from fastapi import Request

from ...application.use_cases import CompletePromptUseCase
from ...core.config import Settings
from ...core.container import Container
from ...infrastructure.cache import ResponseCache
from ...infrastructure.monitoring import MetricsCollector, UsageRecorder


def get_container(request: Request) -> Container:
    """Container built by the app factory."""
    return request.app.state.container


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_complete_prompt_use_case(request: Request) -> CompletePromptUseCase:
    return get_container(request).complete_prompt_use_case()


def get_usage_recorder(request: Request) -> UsageRecorder:
    return get_container(request).usage_recorder()


def get_response_cache(request: Request) -> ResponseCache:
    return get_container(request).response_cache()


def get_metrics_collector(request: Request) -> MetricsCollector:
    return get_container(request).metrics_collector()
