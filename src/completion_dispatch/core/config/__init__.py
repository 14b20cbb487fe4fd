"""Configuration for the completion dispatch engine."""

from .config import Environment, Settings
from .logging import LogFormat, LoggingConfig, LogLevel, setup_logging
from .provider_settings import ProviderSecrets, ProviderSettings

__all__ = [
    "Environment",
    "Settings",
    "ProviderSettings",
    "ProviderSecrets",
    "LoggingConfig",
    "LogFormat",
    "LogLevel",
    "setup_logging",
]
