"""Provider client implementations."""

from .base_client import BaseProviderClient, ChatMessage, ProviderClientConfig, build_messages
from .gemini_client import GeminiClient
from .openrouter_client import OpenRouterClient

__all__ = [
    "BaseProviderClient",
    "ProviderClientConfig",
    "ChatMessage",
    "build_messages",
    "GeminiClient",
    "OpenRouterClient",
]
