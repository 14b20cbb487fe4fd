"""Application-specific exception classes."""

from .base import ApplicationError


class InvalidCandidateError(ApplicationError):
    """Raised when a candidate override names an unknown provider or an empty model."""

    pass
