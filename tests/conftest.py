"""
Pytest configuration and shared fixtures for completion dispatch tests.

Provides scripted provider clients, a recording sleep, in-memory secrets and
provider response payloads shared across the unit and integration suites.
"""

from collections.abc import Callable
from typing import Any

import pytest

from completion_dispatch.domain.enums import ErrorKind, ProviderId
from completion_dispatch.domain.value_objects import CallOutcome, Candidate, CompletionRequest, Failure, Success
from completion_dispatch.infrastructure.secrets import DictSecretSource

pytest_plugins = ["pytest_asyncio"]


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: integration test")


class ScriptedClient:
    """Provider client double that replays scripted outcomes per model.

    A script entry is a ``CallOutcome`` or an exception instance to raise.
    The last entry of a model's script repeats once the script runs out.
    """

    def __init__(self, scripts: dict[str, list[Any]] | None = None):
        self.scripts = {model: list(steps) for model, steps in (scripts or {}).items()}
        self.calls: list[tuple[str, str | None]] = []

    async def call(self, request: CompletionRequest, candidate: Candidate, api_key: str | None) -> CallOutcome:
        self.calls.append((candidate.model, api_key))
        if not api_key:
            return Failure.of(ErrorKind.KEY_MISSING, False, f"{candidate.provider.secret_name} is not configured")

        steps = self.scripts.get(candidate.model) or [Failure.of(ErrorKind.MODEL_NOT_FOUND, False, "not scripted")]
        step = steps.pop(0) if len(steps) > 1 else steps[0]
        if isinstance(step, Exception):
            raise step
        return step

    def calls_for(self, model: str) -> int:
        return sum(1 for called, _ in self.calls if called == model)


class RecordingSleep:
    """Awaitable sleep stand-in that records requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def ok(text: str = "answer", model: str = "resolved-model", tokens: int = 12, elapsed: float = 0.5) -> Success:
    return Success(answer_text=text, resolved_model=model, elapsed_seconds=elapsed, token_count=tokens)


def fail(kind: ErrorKind, retryable: bool, message: str = "") -> Failure:
    return Failure.of(kind, retryable, message)


@pytest.fixture
def scripted_client() -> Callable[..., ScriptedClient]:
    """Factory for scripted provider clients."""
    return ScriptedClient


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    """Sleep double recording every backoff delay."""
    return RecordingSleep()


@pytest.fixture
def outcomes() -> Any:
    """Builders for Success and Failure outcomes."""

    class _Outcomes:
        success = staticmethod(ok)
        failure = staticmethod(fail)

    return _Outcomes


@pytest.fixture
def both_keys() -> DictSecretSource:
    """Secret source with both provider keys configured."""
    return DictSecretSource(
        {
            ProviderId.GEMINI.secret_name: "gemini-test-key",
            ProviderId.OPENROUTER.secret_name: "openrouter-test-key",
        }
    )


@pytest.fixture
def sample_request() -> CompletionRequest:
    """A minimal valid completion request."""
    return CompletionRequest(prompt="What is the capital of France?")


@pytest.fixture
def gemini_success_payload() -> Callable[..., dict[str, Any]]:
    """Gemini generateContent response body."""

    def _payload(text: str = "Paris", model: str = "gemini-2.5-flash-001", tokens: int = 42) -> dict[str, Any]:
        return {
            "candidates": [{"content": {"role": "model", "parts": [{"text": text}]}, "finishReason": "STOP"}],
            "usageMetadata": {"promptTokenCount": 30, "candidatesTokenCount": 12, "totalTokenCount": tokens},
            "modelVersion": model,
        }

    return _payload


@pytest.fixture
def openrouter_success_payload() -> Callable[..., dict[str, Any]]:
    """OpenRouter chat completion response body."""

    def _payload(text: str = "Paris", model: str = "meta-llama/llama-3.3-70b-instruct:free", tokens: int = 25) -> dict[str, Any]:
        return {
            "id": "gen-123",
            "object": "chat.completion",
            "created": 1760000000,
            "model": model,
            "choices": [{"index": 0, "message": {"role": "assistant", "content": text}, "finish_reason": "stop"}],
            "usage": {"prompt_tokens": 10, "completion_tokens": 15, "total_tokens": tokens},
        }

    return _payload


@pytest.fixture
def provider_error_payload() -> Callable[..., dict[str, Any]]:
    """Error body shared by both providers: ``{"error": {"message": ...}}``."""

    def _payload(message: str, code: int = 400) -> dict[str, Any]:
        return {"error": {"code": code, "message": message}}

    return _payload
