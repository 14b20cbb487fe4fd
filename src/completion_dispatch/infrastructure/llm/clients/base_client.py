"""Base provider client interface and common functionality."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any

import httpx
import structlog
from pydantic import BaseModel, Field

from ....domain.enums import ErrorKind, ProviderId
from ....domain.value_objects import CallOutcome, Candidate, CompletionRequest, Failure, Success
from ..error_classifier import classify_status

logger = structlog.get_logger(__name__)


class ProviderClientConfig(BaseModel):
    """Configuration shared by all provider clients."""

    base_url: str
    timeout: float = Field(default=20.0, gt=0)
    max_output_tokens: int = Field(default=1024, ge=1)
    extra_headers: dict[str, str] = Field(default_factory=dict)


class ChatMessage(BaseModel):
    """Provider-neutral conversation turn."""

    role: str
    content: str


def build_messages(request: CompletionRequest) -> list[ChatMessage]:
    """Flatten a request into ordered turns.

    Order: system instruction, few-shot examples, history, then the prompt.
    A few-shot pair is kept only when both sides are present; each side of a
    history pair is kept on its own.
    """
    messages: list[ChatMessage] = []

    if request.system_instruction:
        messages.append(ChatMessage(role="system", content=request.system_instruction))

    for example_input, example_output in request.few_shot:
        if example_input and example_output:
            messages.append(ChatMessage(role="user", content=f"Ex: {example_input}"))
            messages.append(ChatMessage(role="assistant", content=f"Ans: {example_output}"))

    for user_turn, assistant_turn in request.history:
        if user_turn:
            messages.append(ChatMessage(role="user", content=user_turn))
        if assistant_turn:
            messages.append(ChatMessage(role="assistant", content=assistant_turn))

    messages.append(ChatMessage(role="user", content=request.prompt))
    return messages


class BaseProviderClient(ABC):
    """Abstract base class for provider adapters.

    ``call`` performs exactly one HTTP request and normalizes the reply into
    a ``CallOutcome``. Transport errors (``httpx.HTTPError``) are not caught
    here; the retry executor turns them into ``ConnectionFailure``.
    """

    provider: ProviderId

    def __init__(self, config: ProviderClientConfig, http_client: httpx.AsyncClient | None = None):
        """Initialize the provider client.

        Args:
            config: Client configuration
            http_client: Pre-built HTTP client, mainly for tests
        """
        self.config = config
        self._client = http_client or httpx.AsyncClient(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout),
            headers={"Content-Type": "application/json", **config.extra_headers},
        )

    @property
    def name(self) -> str:
        return self.provider.label

    async def call(self, request: CompletionRequest, candidate: Candidate, api_key: str | None) -> CallOutcome:
        """Send one request for one candidate.

        Args:
            request: The completion request
            candidate: The (provider, model) pair to ask
            api_key: Credential for this provider, read at call time

        Returns:
            ``Success`` with the trimmed answer, or a classified ``Failure``

        Raises:
            httpx.HTTPError: On transport failures (timeouts, refused connections)
        """
        if not api_key or not api_key.strip():
            logger.warning("Provider key missing", provider=self.provider.value, model=candidate.model)
            return Failure.of(ErrorKind.KEY_MISSING, False, f"{self.provider.secret_name} is not configured")

        start_time = time.perf_counter()
        response = await self._send(request, candidate.model, api_key.strip())
        elapsed = time.perf_counter() - start_time

        return self._interpret(response, candidate, elapsed)

    def _interpret(self, response: httpx.Response, candidate: Candidate, elapsed: float) -> CallOutcome:
        """Normalize an HTTP response into a call outcome."""
        if response.status_code != 200:
            classification = classify_status(response.status_code)
            message = self._error_message(response)
            logger.info(
                "Provider call failed",
                provider=self.provider.value,
                model=candidate.model,
                status_code=response.status_code,
                error_kind=classification.kind.value,
                retryable=classification.retryable,
            )
            return Failure.of(classification.kind, classification.retryable, message)

        try:
            payload = response.json()
        except ValueError:
            return Failure.of(ErrorKind.MALFORMED_RESPONSE, True, "Response body is not valid JSON")

        answer = self._extract_answer(payload)
        if not answer or not answer.strip():
            return Failure.of(ErrorKind.EMPTY_ANSWER, True, "Provider returned no answer text")

        return Success(
            answer_text=answer.strip(),
            resolved_model=self._extract_model(payload) or candidate.model,
            elapsed_seconds=elapsed,
            token_count=self._extract_tokens(payload),
        )

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Prefer the provider's ``error.message``; fall back to the raw body."""
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])

        return response.text or f"HTTP {response.status_code}"

    @staticmethod
    def _dig(payload: Any, *path: str | int) -> Any:
        """Walk nested dicts and lists, returning None on any missing step."""
        current = payload
        for step in path:
            try:
                current = current[step]
            except (KeyError, IndexError, TypeError):
                return None
        return current

    @classmethod
    def _as_int(cls, value: Any) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return 0

    @abstractmethod
    async def _send(self, request: CompletionRequest, model: str, api_key: str) -> httpx.Response:
        """Issue the provider-specific HTTP request."""

    @abstractmethod
    def _extract_answer(self, payload: Any) -> str | None:
        """Pull the answer text out of a successful response body."""

    @abstractmethod
    def _extract_model(self, payload: Any) -> str | None:
        """Pull the model that actually answered, if reported."""

    @abstractmethod
    def _extract_tokens(self, payload: Any) -> int:
        """Pull the total token count, 0 when absent."""

    async def aclose(self) -> None:
        """Close HTTP client connections."""
        await self._client.aclose()
