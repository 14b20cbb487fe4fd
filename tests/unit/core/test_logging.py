"""Tests for logging setup."""

import json
import logging

import pytest
import structlog
from pydantic import ValidationError
from structlog.contextvars import bind_contextvars, clear_contextvars

from completion_dispatch.core.config import LogFormat, LoggingConfig, setup_logging


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    clear_contextvars()


def read_lines(path) -> list[dict]:
    for handler in logging.getLogger().handlers:
        handler.flush()
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]


@pytest.mark.usefixtures("restore_root_logging")
class TestSetupLogging:
    """Test both logging paths end up in the configured handler."""

    def test_json_file_carries_context(self, tmp_path):
        log_file = tmp_path / "logs" / "app.log"
        setup_logging(LoggingConfig(console_enabled=False, file_enabled=True, file_path=str(log_file)))

        bind_contextvars(request_key="abc123")
        structlog.get_logger("completion_dispatch.tests").info("Answer served from cache", model="g1")
        logging.getLogger("plain.stdlib").warning("Retrying call")

        lines = read_lines(log_file)
        cached = next(line for line in lines if line["event"] == "Answer served from cache")
        retry = next(line for line in lines if line["event"] == "Retrying call")

        assert cached["level"] == "info"
        assert cached["model"] == "g1"
        assert cached["request_key"] == "abc123"
        assert retry["level"] == "warning"
        assert retry["logger"] == "plain.stdlib"
        assert retry["request_key"] == "abc123"
        assert "timestamp" in retry

    def test_text_format_is_not_json(self, tmp_path):
        log_file = tmp_path / "app.log"
        setup_logging(
            LoggingConfig(format=LogFormat.TEXT, console_enabled=False, file_enabled=True, file_path=str(log_file))
        )

        logging.getLogger("plain.stdlib").warning("Retrying call")
        for handler in logging.getLogger().handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "Retrying call" in text
        assert not text.lstrip().startswith("{")

    def test_third_party_levels_applied(self):
        setup_logging(LoggingConfig(console_enabled=False))

        assert logging.getLogger("httpx").level == logging.WARNING


class TestLoggingConfig:
    """Test logging config validation."""

    @pytest.mark.parametrize("size", [1024, 200 * 1024 * 1024])
    def test_file_size_bounded(self, size):
        with pytest.raises(ValidationError):
            LoggingConfig(max_file_size=size)
