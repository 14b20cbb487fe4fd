"""Core exception classes for the completion dispatch engine.

Provider failures are never raised: they travel as ``Failure`` outcomes.
These exceptions cover the construction and operator seams only.
"""

from .application import InvalidCandidateError
from .base import (
    ApplicationError,
    CompletionDispatchError,
    ConfigurationError,
    InfrastructureError,
)
from .infrastructure import ProviderClientError, UsageSinkError

__all__ = [
    # Base exceptions
    "CompletionDispatchError",
    "ConfigurationError",
    "ApplicationError",
    "InfrastructureError",
    # Infrastructure exceptions
    "ProviderClientError",
    "UsageSinkError",
    # Application exceptions
    "InvalidCandidateError",
]
