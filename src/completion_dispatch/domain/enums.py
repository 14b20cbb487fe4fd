"""Domain enums for providers and failure classification."""

from enum import Enum


class ProviderId(str, Enum):
    """Supported text-generation providers."""

    GEMINI = "gemini"
    OPENROUTER = "openrouter"

    @property
    def secret_name(self) -> str:
        """Name of the secret holding this provider's API key."""
        return f"{self.name}_API_KEY"

    @property
    def label(self) -> str:
        """Human-readable provider label used in usage records."""
        return {ProviderId.GEMINI: "Gemini", ProviderId.OPENROUTER: "OpenRouter"}[self]


class ErrorKind(str, Enum):
    """Closed set of per-candidate failure kinds."""

    KEY_MISSING = "KeyMissing"
    AUTH_FAILURE = "AuthFailure"
    RATE_LIMITED = "RateLimited"
    MODEL_NOT_FOUND = "ModelNotFound"
    BAD_REQUEST = "BadRequest"
    SERVER_FAULT = "ServerFault"
    CONNECTION_FAILURE = "ConnectionFailure"
    EMPTY_ANSWER = "EmptyAnswer"
    MALFORMED_RESPONSE = "MalformedResponse"
    UNKNOWN = "Unknown"


class UsageStatus(str, Enum):
    """Status labels written to the usage sink."""

    SUCCESS = "success"
    FAILED = "failed"


class SequencerState(str, Enum):
    """States of one candidate-sequence run."""

    IDLE = "idle"
    TRYING_CANDIDATE = "trying_candidate"
    SUCCESS = "success"
    EXHAUSTED = "exhausted"
