"""Domain layer: requests, candidates, outcomes."""

from .enums import ErrorKind, ProviderId, SequencerState, UsageStatus

__all__ = ["ErrorKind", "ProviderId", "SequencerState", "UsageStatus"]
