"""Monitoring: Prometheus metrics and usage accounting."""

from .metrics_collector import MetricsCollector, MetricsConfig
from .usage_recorder import CsvUsageSink, UsageRecord, UsageRecorder, UsageSink

__all__ = [
    "MetricsCollector",
    "MetricsConfig",
    "UsageRecord",
    "UsageSink",
    "CsvUsageSink",
    "UsageRecorder",
]
