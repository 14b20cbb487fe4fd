"""Resilience patterns for provider calls."""

from .retry import RetryConfig, RetryExecutor

__all__ = ["RetryConfig", "RetryExecutor"]
