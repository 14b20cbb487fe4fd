"""Metrics collection for provider attempts, cache lookups and completions."""

import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import structlog
from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest

from ...domain.value_objects import CallOutcome, Candidate

logger = structlog.get_logger(__name__)


@dataclass
class MetricsConfig:
    """Configuration for metrics collection."""

    enable_prometheus: bool = True
    registry: CollectorRegistry | None = None
    metric_prefix: str = "completion_dispatch"


class MetricsCollector:
    """Prometheus-based metrics collector for the dispatch engine."""

    def __init__(self, config: MetricsConfig | None = None) -> None:
        """Initialize metrics collector with configuration."""
        self.config = config or MetricsConfig()
        self.registry = self.config.registry or CollectorRegistry()

        self._init_prometheus_metrics()

        self._start_time = time.time()

    def _init_prometheus_metrics(self) -> None:
        """Initialize Prometheus metrics."""
        prefix = self.config.metric_prefix

        # Provider metrics
        self.provider_attempts_total = Counter(
            f"{prefix}_provider_attempts_total",
            "Provider call attempts by outcome",
            labelnames=["provider", "model", "status"],
            registry=self.registry,
        )

        self.provider_attempt_duration = Histogram(
            f"{prefix}_provider_attempt_duration_seconds",
            "Provider call duration in seconds",
            labelnames=["provider", "model"],
            registry=self.registry,
        )

        self.tokens_used = Counter(
            f"{prefix}_tokens_used_total",
            "Total tokens reported by providers",
            labelnames=["provider", "model"],
            registry=self.registry,
        )

        # Cache metrics
        self.cache_lookups_total = Counter(
            f"{prefix}_cache_lookups_total",
            "Response cache lookups",
            labelnames=["result"],
            registry=self.registry,
        )

        # Completion metrics
        self.completions_total = Counter(
            f"{prefix}_completions_total",
            "Top-level completion requests by outcome",
            labelnames=["status"],
            registry=self.registry,
        )

        self.active_completions_gauge = Gauge(
            f"{prefix}_active_completions", "Number of completions in flight", registry=self.registry
        )

        logger.info("Prometheus metrics initialized", prefix=prefix)

    def record_attempt(self, candidate: Candidate, attempt: int, outcome: CallOutcome, duration_seconds: float) -> None:
        """Record one provider call attempt."""
        provider = candidate.provider.value
        status = "success" if outcome.ok else outcome.error_kind.value

        self.provider_attempts_total.labels(provider=provider, model=candidate.model, status=status).inc()
        self.provider_attempt_duration.labels(provider=provider, model=candidate.model).observe(duration_seconds)

        if outcome.ok and outcome.token_count:
            self.tokens_used.labels(provider=provider, model=candidate.model).inc(outcome.token_count)

        logger.debug(
            "Provider attempt recorded",
            provider=provider,
            model=candidate.model,
            attempt=attempt,
            status=status,
            duration_seconds=duration_seconds,
        )

    def record_cache_lookup(self, hit: bool) -> None:
        """Record a cache hit or miss."""
        self.cache_lookups_total.labels(result="hit" if hit else "miss").inc()

    def record_completion(self, status: str) -> None:
        """Record the outcome of one top-level completion."""
        self.completions_total.labels(status=status).inc()

    def increment_active(self) -> None:
        self.active_completions_gauge.inc()

    def decrement_active(self) -> None:
        self.active_completions_gauge.dec()

    def get_prometheus_metrics(self) -> str:
        """Get Prometheus metrics in text format."""
        if not self.config.enable_prometheus:
            return ""

        return generate_latest(self.registry).decode("utf-8")

    def get_system_stats(self) -> dict[str, Any]:
        """Get uptime and metrics configuration."""
        uptime_seconds = time.time() - self._start_time

        return {
            "uptime_seconds": uptime_seconds,
            "uptime_human": str(timedelta(seconds=int(uptime_seconds))),
            "enable_prometheus": self.config.enable_prometheus,
            "metric_prefix": self.config.metric_prefix,
        }
