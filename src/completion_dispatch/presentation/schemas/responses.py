"""Response schemas for API endpoints."""

from typing import Any

from pydantic import Field

from ...application.dtos import CompletionResult
from .common import BaseSchema


class CompletionResponse(BaseSchema):
    """Response schema for a completion. Provider failures are data, not HTTP errors."""

    text: str = Field(..., description="Answer text or tagged failure message")
    success: bool = Field(..., description="Whether an answer was produced")
    cached: bool = Field(False, description="Whether the answer came from the cache")
    model: str | None = Field(None, description="Model that actually answered")
    provider: str | None = Field(None, description="Provider that answered")
    token_count: int = Field(0, description="Tokens reported by the provider")
    elapsed_seconds: float = Field(0.0, description="Latency of the answering call")
    error_kind: str | None = Field(None, description="Failure kind when success is false")

    @classmethod
    def from_result(cls, result: CompletionResult) -> "CompletionResponse":
        return cls(**result.model_dump())


class FlushResponse(BaseSchema):
    """Response schema for a usage flush."""

    flushed: int = Field(..., description="Number of usage records written")


class ClearResponse(BaseSchema):
    """Response schema for clear operations."""

    cleared: str = Field(..., description="What was cleared")


class HealthResponse(BaseSchema):
    """Response schema for the health endpoint."""

    status: str
    timestamp: float
    service: str
    version: str
    providers: dict[str, dict[str, Any]] = Field(default_factory=dict)
    system: dict[str, Any] = Field(default_factory=dict, description="Uptime and metrics configuration")
