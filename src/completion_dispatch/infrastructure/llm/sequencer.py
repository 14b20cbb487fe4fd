"""Drives an ordered candidate queue to a single success or exhaustion."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable

import structlog

from ...domain.enums import ProviderId, SequencerState
from ...domain.value_objects import (
    AllCandidatesExhausted,
    Candidate,
    CandidateAttempt,
    CandidateQueue,
    CompletionRequest,
    SequenceResult,
    SequenceSuccess,
)
from ..secrets import SecretSource
from .resilience.retry import RetryExecutor

logger = structlog.get_logger(__name__)


class CandidateSequencer:
    """Tries candidates strictly in order, one at a time.

    State per run: ``IDLE -> TRYING_CANDIDATE(i) -> SUCCESS | EXHAUSTED``.
    The first success ends the run; no candidate is visited twice. The
    sequencer itself holds no per-run state, so one instance serves
    concurrent requests.

    With a time budget, the first candidate is always tried; no further
    candidate starts once the budget is spent, and the rest are reported as
    not tried. A call already in flight is not interrupted.
    """

    def __init__(
        self,
        executor: RetryExecutor,
        secrets: SecretSource,
        fallback_plan: Iterable[tuple[ProviderId, Iterable[str]]],
        default_primary: Candidate | None = None,
        auto_select: Candidate | None = None,
        time_budget_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the sequencer.

        Args:
            executor: Retry executor used for every candidate
            secrets: Source of provider API keys, read at call time
            fallback_plan: (provider, models) lists in provider priority order
            default_primary: Candidate tried first when the caller names none
            auto_select: Provider-side auto-routing candidate, tried last
            time_budget_seconds: Wall-clock budget per run; None means unbounded
            clock: Monotonic clock, replaced in tests
        """
        if time_budget_seconds is not None and time_budget_seconds <= 0:
            raise ValueError("time_budget_seconds must be positive")
        self.executor = executor
        self.secrets = secrets
        self.fallback_plan = [(provider, list(models)) for provider, models in fallback_plan]
        self.default_primary = default_primary
        self.auto_select = auto_select
        self.time_budget_seconds = time_budget_seconds
        self._clock = clock

    def build_queue(self, override: Candidate | None = None) -> CandidateQueue:
        """Trial order for one run: primary, fallback lists, auto-select."""
        return CandidateQueue.build(
            primary=override or self.default_primary,
            fallback_lists=self.fallback_plan,
            auto_select=self.auto_select,
        )

    async def run(self, request: CompletionRequest, override: Candidate | None = None) -> SequenceResult:
        """Run the queue until one candidate answers or the budget runs out.

        Args:
            request: The completion request
            override: Caller-chosen primary candidate

        Returns:
            ``SequenceSuccess`` for the first answering candidate, or
            ``AllCandidatesExhausted`` with one entry per candidate in trial order
        """
        queue = self.build_queue(override)
        failures: list[CandidateAttempt] = []
        state = SequencerState.IDLE
        started = self._clock()

        for index, candidate in enumerate(queue):
            if index > 0 and self._budget_spent(started):
                skipped = tuple(list(queue)[index:])
                logger.warning(
                    "Time budget exhausted, skipping remaining candidates",
                    budget_seconds=self.time_budget_seconds,
                    tried=index,
                    skipped=len(skipped),
                )
                return self._exhausted(failures, skipped)

            state = SequencerState.TRYING_CANDIDATE
            logger.debug("Trying candidate", state=state.value, position=candidate.position, candidate=candidate.label)

            api_key = self.secrets.get_secret(candidate.provider.secret_name)
            outcome = await self.executor.execute(request, candidate, api_key)

            if outcome.ok:
                state = SequencerState.SUCCESS
                logger.info(
                    "Candidate answered",
                    state=state.value,
                    candidate=candidate.label,
                    resolved_model=outcome.resolved_model,
                    failed_before=len(failures),
                )
                return SequenceSuccess(candidate=candidate, outcome=outcome, failures_before=tuple(failures))

            failures.append(CandidateAttempt(candidate=candidate, failure=outcome))
            logger.info("Candidate failed", candidate=candidate.label, error_kind=outcome.error_kind.value)

        return self._exhausted(failures, ())

    def _budget_spent(self, started: float) -> bool:
        if self.time_budget_seconds is None:
            return False
        return self._clock() - started >= self.time_budget_seconds

    def _exhausted(self, failures: list[CandidateAttempt], skipped: tuple[Candidate, ...]) -> AllCandidatesExhausted:
        logger.warning(
            "All candidates exhausted",
            state=SequencerState.EXHAUSTED.value,
            tried=len(failures),
            skipped=len(skipped),
        )
        return AllCandidatesExhausted(
            attempts=tuple(failures),
            skipped=skipped,
            budget_seconds=self.time_budget_seconds,
        )
