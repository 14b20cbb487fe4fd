"""Completion dispatch: prompt completion with retry and fallback across LLM providers."""

__version__ = "1.0.0"
