"""OpenRouter provider client (OpenAI-compatible chat completions)."""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import BaseModel

from ....domain.enums import ProviderId
from ....domain.value_objects import CompletionRequest
from .base_client import BaseProviderClient, ChatMessage, build_messages


class OpenRouterRequest(BaseModel):
    """OpenRouter API request format."""

    model: str
    messages: list[ChatMessage]
    temperature: float
    max_tokens: int


class OpenRouterClient(BaseProviderClient):
    """Client for ``POST {base}/chat/completions`` with a bearer token."""

    provider = ProviderId.OPENROUTER

    async def _send(self, request: CompletionRequest, model: str, api_key: str) -> httpx.Response:
        body = self._prepare_request(request, model)
        return await self._client.post(
            "/chat/completions",
            json=body.model_dump(),
            headers={"Authorization": f"Bearer {api_key}"},
        )

    def _prepare_request(self, request: CompletionRequest, model: str) -> OpenRouterRequest:
        """Prepare an OpenRouter request; roles map one to one."""
        return OpenRouterRequest(
            model=model,
            messages=build_messages(request),
            temperature=request.temperature,
            max_tokens=self.config.max_output_tokens,
        )

    def _extract_answer(self, payload: Any) -> str | None:
        content = self._dig(payload, "choices", 0, "message", "content")
        return content if isinstance(content, str) else None

    def _extract_model(self, payload: Any) -> str | None:
        model = self._dig(payload, "model")
        return model if isinstance(model, str) and model else None

    def _extract_tokens(self, payload: Any) -> int:
        return self._as_int(self._dig(payload, "usage", "total_tokens"))
