"""Use case for answering one prompt through the candidate fallback chain."""

from __future__ import annotations

from collections.abc import Sequence

import structlog
from pydantic import ValidationError
from structlog.contextvars import bind_contextvars, unbind_contextvars

from ...core.exceptions import InvalidCandidateError
from ...domain.enums import UsageStatus
from ...domain.value_objects import Candidate, CompletionRequest
from ...infrastructure.cache import ResponseCache, make_cache_key
from ...infrastructure.llm.sequencer import CandidateSequencer
from ...infrastructure.monitoring import MetricsCollector, UsageRecorder
from ..dtos import CompletionResult

logger = structlog.get_logger(__name__)

PairRows = Sequence[Sequence[str | None]] | None


class CompletePromptUseCase:
    """
    Top-level entry point: validate, consult the cache, run the sequencer, account.

    Never raises. Every outcome, including bad input and total provider
    failure, comes back as text.
    """

    def __init__(
        self,
        sequencer: CandidateSequencer,
        usage_recorder: UsageRecorder,
        cache: ResponseCache | None = None,
        metrics: MetricsCollector | None = None,
        default_temperature: float = 0.3,
    ) -> None:
        """
        Initialize the use case with its collaborators.

        Args:
            sequencer: Candidate sequencer that produces the answer
            usage_recorder: Buffer receiving one record per provider run
            cache: Response cache; None disables caching
            metrics: Optional Prometheus collector
            default_temperature: Temperature used when the caller gives none
        """
        self._sequencer = sequencer
        self._usage = usage_recorder
        self._cache = cache
        self._metrics = metrics
        self._default_temperature = default_temperature

    async def complete(
        self,
        prompt: str | None,
        system_instruction: str | None = None,
        temperature: float | None = None,
        few_shot: PairRows = None,
        history: PairRows = None,
        candidate_override: str | None = None,
        show_provenance: bool = False,
    ) -> str:
        """Answer a prompt, returning the answer or a tagged failure string."""
        result = await self.complete_detailed(
            prompt,
            system_instruction=system_instruction,
            temperature=temperature,
            few_shot=few_shot,
            history=history,
            candidate_override=candidate_override,
            show_provenance=show_provenance,
        )
        return result.text

    async def complete_detailed(
        self,
        prompt: str | None,
        system_instruction: str | None = None,
        temperature: float | None = None,
        few_shot: PairRows = None,
        history: PairRows = None,
        candidate_override: str | None = None,
        show_provenance: bool = False,
    ) -> CompletionResult:
        """
        Answer a prompt and report how it was answered.

        Args:
            prompt: The question; blank prompts get a notice
            system_instruction: Optional role or rules for the model
            temperature: Sampling temperature, defaults to the configured value
            few_shot: Ordered (input, output) example rows
            history: Ordered (user, assistant) prior turns
            candidate_override: ``"provider:model"`` or a bare model id tried first
            show_provenance: Prefix the answer with model, tokens and latency

        Returns:
            Completion result; ``text`` is what ``complete`` returns
        """
        if prompt is None or not str(prompt).strip():
            return CompletionResult.notice()

        try:
            request = CompletionRequest(
                prompt=prompt,
                system_instruction=system_instruction,
                temperature=self._default_temperature if temperature is None else temperature,
                few_shot=few_shot or (),
                history=history or (),
            )
        except ValidationError as e:
            return CompletionResult.bad_request(self._format_validation_error(e))
        except (TypeError, ValueError) as e:
            return CompletionResult.bad_request(str(e) or e.__class__.__name__)

        override = None
        if candidate_override is not None:
            try:
                override = Candidate.parse(candidate_override)
            except InvalidCandidateError as e:
                return CompletionResult.bad_request(e.message)

        cache_key = make_cache_key(request.prompt, request.system_instruction, request.temperature)
        bind_contextvars(request_key=cache_key[:12])

        if self._metrics:
            self._metrics.increment_active()
        try:
            return await self._run(request, cache_key, override, show_provenance)
        except Exception as e:
            logger.error("Completion failed unexpectedly", error=str(e), exc_info=True)
            self._record_completion("error")
            return CompletionResult.from_error(f"[Unknown] {e}", error_kind="Unknown")
        finally:
            if self._metrics:
                self._metrics.decrement_active()
            unbind_contextvars("request_key")

    async def _run(
        self,
        request: CompletionRequest,
        cache_key: str,
        override: Candidate | None,
        show_provenance: bool,
    ) -> CompletionResult:
        if self._cache is not None:
            cached = self._cache.get(cache_key)
            if self._metrics:
                self._metrics.record_cache_lookup(hit=cached is not None)
            if cached is not None:
                logger.info("Answer served from cache")
                self._record_completion("cached")
                return CompletionResult.from_cache(cached, show_provenance)

        logger.info(
            "Starting completion",
            prompt_length=len(request.prompt),
            temperature=request.temperature,
            override=override.label if override else None,
        )

        result = await self._sequencer.run(request, override)

        if not result.ok:
            self._usage.record(
                model=result.attempts[0].candidate.model if result.attempts else "-",
                provider="All",
                status=UsageStatus.FAILED,
                prompt=request.prompt_preview,
            )
            self._record_completion("failed")
            return CompletionResult.from_error(result.describe(), error_kind=result.error_kind)

        answer = result.outcome
        if self._cache is not None:
            self._cache.put(cache_key, answer.answer_text)

        self._usage.record(
            model=answer.resolved_model,
            provider=result.candidate.provider.label,
            status=UsageStatus.SUCCESS,
            elapsed_seconds=answer.elapsed_seconds,
            token_count=answer.token_count,
            prompt=request.prompt_preview,
        )
        self._record_completion("success")

        return CompletionResult.from_answer(
            answer.answer_text,
            model=answer.resolved_model,
            provider=result.candidate.provider.value,
            token_count=answer.token_count,
            elapsed_seconds=answer.elapsed_seconds,
            show_provenance=show_provenance,
        )

    def _record_completion(self, status: str) -> None:
        if self._metrics:
            self._metrics.record_completion(status)

    @staticmethod
    def _format_validation_error(error: ValidationError) -> str:
        """First validation problem as ``field: message``."""
        first = error.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = first.get("msg", "invalid input")
        return f"{location}: {message}" if location else message
