"""Infrastructure-specific exception classes."""

from .base import InfrastructureError


class ProviderClientError(InfrastructureError):
    """Raised when a provider adapter cannot be built or used."""

    def __init__(self, message: str, provider: str, original_error: Exception | None = None):
        super().__init__(message, details={"provider": provider})
        self.provider = provider
        self.original_error = original_error


class UsageSinkError(InfrastructureError):
    """Raised when usage records cannot be written to the durable sink."""

    pass
