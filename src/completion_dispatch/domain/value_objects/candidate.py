"""Candidate value objects and the ordered candidate queue."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from ...core.exceptions import InvalidCandidateError
from ..enums import ProviderId


@dataclass(frozen=True)
class Candidate:
    """One (provider, model) pair eligible to answer a request."""

    provider: ProviderId
    model: str
    position: int = 0

    def __post_init__(self):
        if not self.model or not self.model.strip():
            raise InvalidCandidateError("Candidate model cannot be empty")

    @property
    def key(self) -> tuple[ProviderId, str]:
        """Identity used for deduplication."""
        return (self.provider, self.model)

    @property
    def label(self) -> str:
        return f"{self.provider.value}/{self.model}"

    def __str__(self) -> str:
        return self.label

    @classmethod
    def parse(cls, value: str) -> Candidate:
        """Parse a caller override.

        Accepts ``"provider:model"`` (split on the first colon, so OpenRouter
        ids such as ``"openrouter:meta-llama/llama-3.3-70b-instruct:free"``
        survive) or a bare model id whose provider is inferred: ``gemini-*``
        models go to Gemini, everything else to OpenRouter.

        Raises:
            InvalidCandidateError: If the override is not text, or it or its model part is empty
        """
        if value is not None and not isinstance(value, str):
            raise InvalidCandidateError(f"Candidate override must be text, got {type(value).__name__}")
        text = (value or "").strip()
        if not text:
            raise InvalidCandidateError("Candidate override cannot be empty")

        prefix, sep, rest = text.partition(":")
        known = {provider.value: provider for provider in ProviderId}
        if sep and prefix.strip().lower() in known:
            return cls(provider=known[prefix.strip().lower()], model=rest.strip())

        provider = ProviderId.GEMINI if text.lower().startswith("gemini") else ProviderId.OPENROUTER
        return cls(provider=provider, model=text)


class CandidateQueue:
    """Ordered, deduplicated sequence of candidates for one sequencer run.

    The primary candidate, when given, is always first even if it also
    appears in a later fallback list. The auto-select candidate is last.
    """

    def __init__(self, candidates: Iterable[Candidate] = ()):
        self._candidates: list[Candidate] = []
        self._seen: set[tuple[ProviderId, str]] = set()
        for candidate in candidates:
            self.add(candidate.provider, candidate.model)

    @classmethod
    def build(
        cls,
        primary: Candidate | None,
        fallback_lists: Iterable[tuple[ProviderId, Iterable[str]]],
        auto_select: Candidate | None = None,
    ) -> CandidateQueue:
        """Assemble the trial order: primary, fallback lists in priority order, auto-select."""
        queue = cls()
        if primary is not None:
            queue.add(primary.provider, primary.model)

        for provider, models in fallback_lists:
            for model in models:
                queue.add(provider, model)

        if auto_select is not None:
            queue.add(auto_select.provider, auto_select.model)

        return queue

    def add(self, provider: ProviderId, model: str) -> bool:
        """Append a candidate unless its (provider, model) pair was already queued."""
        if (provider, model) in self._seen:
            return False
        self._seen.add((provider, model))
        self._candidates.append(Candidate(provider=provider, model=model, position=len(self._candidates)))
        return True

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self._candidates)

    def __len__(self) -> int:
        return len(self._candidates)

    def __getitem__(self, index: int) -> Candidate:
        return self._candidates[index]

    def __bool__(self) -> bool:
        return bool(self._candidates)

    def labels(self) -> list[str]:
        return [candidate.label for candidate in self._candidates]
