"""Logging configuration and setup for the completion dispatch engine.

structlog events and plain stdlib records (httpx, uvicorn, the retry
executor) go through one ``ProcessorFormatter`` so both come out in the same
JSON or console format with the bound request context.
"""

from __future__ import annotations

import logging
import sys
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path

import structlog
from pydantic import BaseModel, Field, field_validator
from structlog.contextvars import merge_contextvars
from structlog.types import Processor


class LogLevel(str, Enum):
    """Supported logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Supported logging output formats."""

    JSON = "json"
    TEXT = "text"


class LoggingConfig(BaseModel):
    """Centralized logging configuration."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Logging level for the application")
    format: LogFormat = Field(default=LogFormat.JSON, description="Output format for log messages")

    console_enabled: bool = Field(default=True, description="Enable console output")
    file_enabled: bool = Field(default=False, description="Enable file output")
    file_path: str = Field(default="logs/app.log", description="Log file path")

    max_file_size: int = Field(default=10 * 1024 * 1024, description="Maximum log file size in bytes")
    backup_count: int = Field(default=5, description="Number of rotated files to keep")

    third_party_levels: dict[str, LogLevel] = Field(
        default_factory=lambda: {
            "httpx": LogLevel.WARNING,
            "httpcore": LogLevel.WARNING,
            "uvicorn": LogLevel.INFO,
            "fastapi": LogLevel.INFO,
        },
        description="Logging levels for third-party libraries",
    )

    @field_validator("max_file_size")
    @classmethod
    def validate_file_size(cls, v: int) -> int:
        """Keep rotation size between 1MB and 100MB."""
        if not 1024 * 1024 <= v <= 100 * 1024 * 1024:
            raise ValueError("Max file size must be between 1MB and 100MB")
        return v


def _shared_processors() -> list[Processor]:
    """Processors applied to structlog events and foreign stdlib records alike."""
    return [
        merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _build_formatter(log_format: LogFormat) -> structlog.stdlib.ProcessorFormatter:
    if log_format == LogFormat.JSON:
        render: list[Processor] = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        render = [structlog.dev.ConsoleRenderer(colors=False)]

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *render],
    )


def _build_handlers(config: LoggingConfig) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []

    if config.console_enabled:
        handlers.append(logging.StreamHandler(sys.stdout))

    if config.file_enabled:
        log_path = Path(config.file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                filename=str(log_path),
                maxBytes=config.max_file_size,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
        )

    formatter = _build_formatter(config.format)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(config: LoggingConfig) -> None:
    """Route structlog and stdlib logging through the configured handlers.

    Safe to call again: root handlers are replaced, not added to.
    """
    logging.basicConfig(level=config.level.value, handlers=_build_handlers(config), force=True)

    for lib_name, level in config.third_party_levels.items():
        logging.getLogger(lib_name).setLevel(level.value)

    structlog.configure(
        processors=[*_shared_processors(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    structlog.get_logger(__name__).info(
        "Logging system initialized",
        level=config.level.value,
        format=config.format.value,
        console_enabled=config.console_enabled,
        file_enabled=config.file_enabled,
        file_path=config.file_path if config.file_enabled else None,
    )

