"""Call outcomes and sequence results.

``CallOutcome`` is a tagged variant: a provider call either produced an
answer (``Success``) or a classified, human-readable ``Failure``. Failures are
values, never exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..enums import ErrorKind
from .candidate import Candidate

MAX_MESSAGE_LENGTH = 150


@dataclass(frozen=True)
class Success:
    """A non-empty answer from one provider call."""

    answer_text: str
    resolved_model: str
    elapsed_seconds: float = 0.0
    token_count: int = 0

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """A classified failure of one provider call."""

    error_kind: ErrorKind
    retryable: bool
    message: str = ""

    @property
    def ok(self) -> bool:
        return False

    def describe(self) -> str:
        """Taxonomy-tagged message, e.g. ``[RateLimited] quota exceeded``."""
        if self.message:
            return f"[{self.error_kind.value}] {self.message}"
        return f"[{self.error_kind.value}]"

    @classmethod
    def of(cls, error_kind: ErrorKind, retryable: bool, message: str = "") -> Failure:
        """Build a failure with the message on one line and cut to the reporting limit."""
        flat = " ".join((message or "").split())
        return cls(error_kind=error_kind, retryable=retryable, message=flat[:MAX_MESSAGE_LENGTH])


CallOutcome = Success | Failure


@dataclass(frozen=True)
class CandidateAttempt:
    """The last failure a candidate returned before the sequencer moved on."""

    candidate: Candidate
    failure: Failure

    def describe(self) -> str:
        return f"{self.candidate.label}: {self.failure.describe()}"


@dataclass(frozen=True)
class SequenceSuccess:
    """Terminal success of a sequencer run."""

    candidate: Candidate
    outcome: Success
    failures_before: tuple[CandidateAttempt, ...] = ()

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class AllCandidatesExhausted:
    """Terminal failure: every candidate failed or was skipped, kept in trial order.

    ``skipped`` holds the candidates never called because the run's time
    budget ran out; they always follow ``attempts``.
    """

    attempts: tuple[CandidateAttempt, ...] = field(default_factory=tuple)
    skipped: tuple[Candidate, ...] = field(default_factory=tuple)
    budget_seconds: float | None = None

    @property
    def ok(self) -> bool:
        return False

    @property
    def error_kind(self) -> str:
        return "AllCandidatesExhausted"

    def detail_lines(self) -> list[str]:
        lines = [attempt.describe() for attempt in self.attempts]
        if self.skipped:
            reason = f"time budget of {self.budget_seconds:g}s exhausted" if self.budget_seconds else "time budget exhausted"
            lines.extend(f"{candidate.label}: [NotTried] {reason}" for candidate in self.skipped)
        return lines

    def describe(self) -> str:
        """Header line followed by one line per candidate."""
        if not self.attempts and not self.skipped:
            return "[AllCandidatesExhausted] no candidates were configured"
        return "\n".join(["[AllCandidatesExhausted]", *self.detail_lines()])


SequenceResult = SequenceSuccess | AllCandidatesExhausted
