"""API request and response schemas."""

from .common import BaseSchema
from .requests import CompletionRequestSchema
from .responses import ClearResponse, CompletionResponse, FlushResponse, HealthResponse

__all__ = [
    "BaseSchema",
    "CompletionRequestSchema",
    "CompletionResponse",
    "FlushResponse",
    "ClearResponse",
    "HealthResponse",
]
