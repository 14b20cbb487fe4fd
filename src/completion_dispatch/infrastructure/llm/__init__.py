"""Provider clients, retry and candidate sequencing."""

from .clients import BaseProviderClient, GeminiClient, OpenRouterClient, ProviderClientConfig
from .error_classifier import ErrorClassification, classify_status
from .factory import ProviderClientFactory
from .resilience import RetryConfig, RetryExecutor
from .sequencer import CandidateSequencer

__all__ = [
    "BaseProviderClient",
    "ProviderClientConfig",
    "GeminiClient",
    "OpenRouterClient",
    "ErrorClassification",
    "classify_status",
    "ProviderClientFactory",
    "RetryConfig",
    "RetryExecutor",
    "CandidateSequencer",
]
