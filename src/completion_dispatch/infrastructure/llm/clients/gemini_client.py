"""Gemini provider client (Google Generative Language API)."""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import BaseModel, Field

from ....domain.enums import ProviderId
from ....domain.value_objects import CompletionRequest
from .base_client import BaseProviderClient, build_messages


class GeminiPart(BaseModel):
    text: str


class GeminiContent(BaseModel):
    role: str
    parts: list[GeminiPart]


class GeminiGenerationConfig(BaseModel):
    temperature: float
    maxOutputTokens: int


class GeminiRequest(BaseModel):
    """Gemini ``generateContent`` request format."""

    contents: list[GeminiContent]
    generationConfig: GeminiGenerationConfig
    system_instruction: GeminiContent | None = Field(default=None)


class GeminiClient(BaseProviderClient):
    """Client for ``POST {base}/models/{model}:generateContent?key=...``."""

    provider = ProviderId.GEMINI

    async def _send(self, request: CompletionRequest, model: str, api_key: str) -> httpx.Response:
        body = self._prepare_request(request)
        return await self._client.post(
            f"/models/{model}:generateContent",
            params={"key": api_key},
            json=body.model_dump(exclude_none=True),
        )

    def _prepare_request(self, request: CompletionRequest) -> GeminiRequest:
        """Prepare a Gemini request.

        The system turn moves to ``system_instruction``; assistant turns use
        the ``model`` role.
        """
        system_instruction = None
        contents: list[GeminiContent] = []

        for message in build_messages(request):
            if message.role == "system":
                system_instruction = GeminiContent(role="system", parts=[GeminiPart(text=message.content)])
                continue
            role = "model" if message.role == "assistant" else "user"
            contents.append(GeminiContent(role=role, parts=[GeminiPart(text=message.content)]))

        return GeminiRequest(
            contents=contents,
            generationConfig=GeminiGenerationConfig(
                temperature=request.temperature,
                maxOutputTokens=self.config.max_output_tokens,
            ),
            system_instruction=system_instruction,
        )

    def _extract_answer(self, payload: Any) -> str | None:
        text = self._dig(payload, "candidates", 0, "content", "parts", 0, "text")
        return text if isinstance(text, str) else None

    def _extract_model(self, payload: Any) -> str | None:
        model = self._dig(payload, "modelVersion")
        return model if isinstance(model, str) and model else None

    def _extract_tokens(self, payload: Any) -> int:
        return self._as_int(self._dig(payload, "usageMetadata", "totalTokenCount"))
