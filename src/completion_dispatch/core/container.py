"""Dependency injection container for the completion dispatch engine.

This module wires together all components from one explicit ``Settings``
instance. There is no global container: call ``create_container``.
"""

from typing import Any

import structlog
from dependency_injector import containers, providers

from ..application.use_cases.complete_prompt_use_case import CompletePromptUseCase
from ..infrastructure.cache import InMemoryTTLStore, ResponseCache
from ..infrastructure.llm.factory import ProviderClientFactory
from ..infrastructure.llm.resilience.retry import RetryConfig, RetryExecutor
from ..infrastructure.llm.sequencer import CandidateSequencer
from ..infrastructure.monitoring import CsvUsageSink, MetricsCollector, MetricsConfig, UsageRecorder
from ..infrastructure.secrets import SettingsSecretSource
from .config import Settings
from .exceptions import ConfigurationError, InvalidCandidateError

logger = structlog.get_logger(__name__)


def _enabled(flag: bool, component: Any) -> Any:
    return component if flag else None


class Container(containers.DeclarativeContainer):
    """Main DI container for the application."""

    # Configuration
    config = providers.Configuration()
    settings = providers.Dependency(instance_of=Settings)

    # Secrets
    secret_source = providers.Singleton(SettingsSecretSource)

    # Cache
    ttl_store = providers.Singleton(InMemoryTTLStore, max_entries=config.CACHE_MAX_ENTRIES)

    response_cache = providers.Singleton(
        ResponseCache,
        store=ttl_store,
        ttl_seconds=config.CACHE_TTL_SECONDS,
        max_entry_bytes=config.CACHE_MAX_ENTRY_BYTES,
    )

    # Monitoring
    metrics_config = providers.Factory(
        MetricsConfig,
        enable_prometheus=config.MONITORING_METRICS_ENABLED,
        metric_prefix=config.METRICS_PREFIX,
    )

    metrics_collector = providers.Singleton(MetricsCollector, config=metrics_config)

    usage_sink = providers.Singleton(CsvUsageSink, path=config.USAGE_LOG_PATH)

    usage_recorder = providers.Singleton(UsageRecorder, sink=usage_sink, capacity=config.USAGE_BUFFER_SIZE)

    # Providers
    provider_clients = providers.Singleton(ProviderClientFactory.create_clients, settings=settings)

    retry_config = providers.Factory(
        RetryConfig,
        max_attempts=config.retry_config.max_attempts,
        base_delay=config.retry_config.base_delay,
        max_delay=config.retry_config.max_delay,
        linear=config.retry_config.linear,
    )

    retry_executor = providers.Singleton(
        RetryExecutor,
        clients=provider_clients,
        config=retry_config,
        on_attempt=metrics_collector.provided.record_attempt,
    )

    sequencer = providers.Singleton(
        CandidateSequencer,
        executor=retry_executor,
        secrets=secret_source,
        fallback_plan=settings.provided.fallback_plan.call(),
        default_primary=settings.provided.primary_candidate.call(),
        auto_select=settings.provided.auto_select_candidate.call(),
        time_budget_seconds=config.HOST_TIME_BUDGET_SECONDS,
    )

    # Use cases
    complete_prompt_use_case = providers.Singleton(
        CompletePromptUseCase,
        sequencer=sequencer,
        usage_recorder=usage_recorder,
        cache=providers.Callable(_enabled, config.CACHE_ENABLED, response_cache),
        metrics=metrics_collector,
        default_temperature=config.DEFAULT_TEMPERATURE,
    )


def create_container(settings: Settings) -> Container:
    """Build a container configured from ``settings``.

    Raises:
        ConfigurationError: If ``PRIMARY_MODEL`` is not a valid candidate
    """
    try:
        settings.primary_candidate()
    except InvalidCandidateError as e:
        raise ConfigurationError(
            f"Invalid PRIMARY_MODEL: {e.message}", details={"PRIMARY_MODEL": settings.PRIMARY_MODEL}
        ) from e

    container = Container(settings=providers.Object(settings))
    container.config.from_dict(settings.model_dump())

    worst_case = settings.worst_case_latency_seconds
    if worst_case > settings.HOST_TIME_BUDGET_SECONDS:
        logger.warning(
            "Worst-case latency exceeds host time budget; later candidates will be skipped",
            worst_case_seconds=round(worst_case, 1),
            budget_seconds=settings.HOST_TIME_BUDGET_SECONDS,
            candidates=settings.candidate_count,
            max_attempts=settings.RETRY_MAX_ATTEMPTS,
        )

    return container
