"""Core module containing cross-cutting concerns."""

from .exceptions import (
    ApplicationError,
    CompletionDispatchError,
    ConfigurationError,
    InfrastructureError,
    InvalidCandidateError,
    ProviderClientError,
    UsageSinkError,
)

__all__ = [
    "CompletionDispatchError",
    "ConfigurationError",
    "ApplicationError",
    "InfrastructureError",
    "ProviderClientError",
    "UsageSinkError",
    "InvalidCandidateError",
]
