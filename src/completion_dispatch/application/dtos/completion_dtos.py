"""Data transfer objects for completion requests."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

NOTICE_EMPTY_PROMPT = "[Notice] Please enter a prompt."
CACHE_PROVENANCE = "[cache | 0 tokens | 0.00s]\n"


def provenance_header(model: str, token_count: int, elapsed_seconds: float) -> str:
    """Header line naming the model that answered, its tokens and latency."""
    return f"[{model} | {token_count} tokens | {elapsed_seconds:.2f}s]\n"


class CompletionResult(BaseModel):
    """Outcome of one top-level completion, before flattening to text."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Answer text or tagged failure message")
    success: bool = Field(..., description="Whether an answer was produced")
    cached: bool = Field(default=False, description="Whether the answer came from the cache")
    model: str | None = Field(default=None, description="Model that actually answered")
    provider: str | None = Field(default=None, description="Provider that answered")
    token_count: int = Field(default=0, ge=0)
    elapsed_seconds: float = Field(default=0.0, ge=0.0)
    error_kind: str | None = Field(default=None, description="Aggregate or validation failure kind")

    @classmethod
    def notice(cls, message: str = NOTICE_EMPTY_PROMPT) -> CompletionResult:
        return cls(text=message, success=False, error_kind="Notice")

    @classmethod
    def bad_request(cls, detail: str) -> CompletionResult:
        return cls(text=f"[BadRequest] {detail}", success=False, error_kind="BadRequest")

    @classmethod
    def from_cache(cls, answer: str, show_provenance: bool = False) -> CompletionResult:
        text = f"{CACHE_PROVENANCE}{answer}" if show_provenance else answer
        return cls(text=text, success=True, cached=True, model="cache")

    @classmethod
    def from_answer(
        cls,
        answer: str,
        model: str,
        provider: str,
        token_count: int,
        elapsed_seconds: float,
        show_provenance: bool = False,
    ) -> CompletionResult:
        text = f"{provenance_header(model, token_count, elapsed_seconds)}{answer}" if show_provenance else answer
        return cls(
            text=text,
            success=True,
            model=model,
            provider=provider,
            token_count=token_count,
            elapsed_seconds=elapsed_seconds,
        )

    @classmethod
    def from_error(cls, message: str, error_kind: str, elapsed_seconds: float = 0.0) -> CompletionResult:
        return cls(text=message, success=False, error_kind=error_kind, elapsed_seconds=elapsed_seconds)
