"""Bounded retry with linear backoff for provider calls."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Protocol

import httpx

from ....domain.enums import ErrorKind, ProviderId
from ....domain.value_objects import CallOutcome, Candidate, CompletionRequest, Failure

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class ProviderCaller(Protocol):
    """Anything that performs one provider call."""

    async def call(self, request: CompletionRequest, candidate: Candidate, api_key: str | None) -> CallOutcome: ...


AttemptListener = Callable[[Candidate, int, CallOutcome, float], None]


class RetryConfig:
    """Configuration for retry mechanism."""

    def __init__(
        self,
        max_attempts: int = 2,
        base_delay: float = 1.0,
        max_delay: float = 10.0,
        linear: bool = True,
    ):
        """Initialize retry configuration.

        Args:
            max_attempts: Total attempts per candidate, including the first
            base_delay: Delay in seconds before the first retry
            max_delay: Upper bound for any single delay
            linear: Grow the delay as ``base_delay * attempt``; flat otherwise

        Raises:
            ValueError: If max_attempts is below 1
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.linear = linear

    def delay_for(self, attempt: int) -> float:
        """Delay to wait after failed attempt number ``attempt`` (1-based)."""
        delay = self.base_delay * attempt if self.linear else self.base_delay
        return min(delay, self.max_delay)


class RetryExecutor:
    """Runs one candidate through up to ``max_attempts`` provider calls.

    Non-retryable failures return at once. Retryable failures back off and
    try again until the budget runs out; the last failure is returned as is.
    """

    def __init__(
        self,
        clients: Mapping[ProviderId, ProviderCaller],
        config: RetryConfig | None = None,
        sleep: SleepFunc = asyncio.sleep,
        on_attempt: AttemptListener | None = None,
    ):
        """Initialize the retry executor.

        Args:
            clients: Provider clients keyed by ``ProviderId``
            config: Retry configuration
            sleep: Awaitable sleep, replaced in tests
            on_attempt: Called after every attempt with (candidate, attempt, outcome, seconds)
        """
        self.clients = clients
        self.config = config or RetryConfig()
        self._sleep = sleep
        self._on_attempt = on_attempt

    async def execute(
        self,
        request: CompletionRequest,
        candidate: Candidate,
        api_key: str | None,
        max_attempts: int | None = None,
    ) -> CallOutcome:
        """Call one candidate with retries.

        Args:
            request: The completion request
            candidate: The candidate to try
            api_key: Provider credential
            max_attempts: Override of the configured attempt budget

        Returns:
            The first success, the first non-retryable failure, or the last failure

        Raises:
            ValueError: If max_attempts is below 1
        """
        attempts = self.config.max_attempts if max_attempts is None else max_attempts
        if attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        client = self.clients[candidate.provider]
        outcome: CallOutcome | None = None

        for attempt in range(1, attempts + 1):
            start_time = time.perf_counter()
            try:
                outcome = await client.call(request, candidate, api_key)
            except httpx.HTTPError as e:
                logger.warning(f"Transport error calling {candidate.label}: {e.__class__.__name__}")
                outcome = Failure.of(ErrorKind.CONNECTION_FAILURE, True, str(e) or e.__class__.__name__)

            if self._on_attempt is not None:
                self._on_attempt(candidate, attempt, outcome, time.perf_counter() - start_time)

            if outcome.ok:
                if attempt > 1:
                    logger.info(f"{candidate.label} succeeded after {attempt} attempts")
                return outcome

            if not outcome.retryable:
                logger.info(f"{candidate.label} failed with non-retryable {outcome.error_kind.value}")
                return outcome

            if attempt < attempts:
                delay = self.config.delay_for(attempt)
                logger.debug(f"Retrying {candidate.label} after {delay:.2f}s (attempt {attempt + 1}/{attempts})")
                await self._sleep(delay)

        logger.warning(f"{candidate.label} exhausted {attempts} attempts")
        return outcome  # type: ignore[return-value]
