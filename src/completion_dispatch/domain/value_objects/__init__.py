"""Value objects for the completion dispatch domain."""

from .candidate import Candidate, CandidateQueue
from .completion import DEFAULT_TEMPERATURE, CompletionRequest
from .outcome import (
    AllCandidatesExhausted,
    CallOutcome,
    CandidateAttempt,
    Failure,
    SequenceResult,
    SequenceSuccess,
    Success,
)

__all__ = [
    "Candidate",
    "CandidateQueue",
    "CompletionRequest",
    "DEFAULT_TEMPERATURE",
    "CallOutcome",
    "Success",
    "Failure",
    "CandidateAttempt",
    "SequenceResult",
    "SequenceSuccess",
    "AllCandidatesExhausted",
]
