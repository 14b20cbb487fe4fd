"""Usage accounting: a bounded in-memory buffer drained to a durable sink."""

from __future__ import annotations

import csv
import threading
from collections import deque
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

import structlog
from pydantic import BaseModel, ConfigDict, Field

from ...core.exceptions import UsageSinkError
from ...domain.enums import UsageStatus

logger = structlog.get_logger(__name__)

PROMPT_PREVIEW_LENGTH = 100

CSV_HEADER = ["timestamp", "model", "provider", "status", "elapsed_seconds", "token_count", "prompt"]


class UsageRecord(BaseModel):
    """One row of usage accounting, written once per top-level request."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    model: str
    provider: str
    status: UsageStatus
    elapsed_seconds: float = 0.0
    token_count: int = 0
    prompt: str = ""

    def to_row(self) -> list[str]:
        return [
            self.timestamp.isoformat(),
            self.model,
            self.provider,
            self.status.value,
            f"{self.elapsed_seconds:.2f}",
            str(self.token_count),
            self.prompt,
        ]


class UsageSink(Protocol):
    """Durable tabular destination for usage records."""

    def write(self, records: Sequence[UsageRecord]) -> None: ...

    def clear(self) -> None: ...


class CsvUsageSink:
    """Appends usage records to a CSV file with a fixed header."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def write(self, records: Sequence[UsageRecord]) -> None:
        """Append records, writing the header first when the file is new.

        Raises:
            UsageSinkError: If the file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            is_new = not self.path.exists() or self.path.stat().st_size == 0
            with self.path.open("a", newline="", encoding="utf-8") as handle:
                writer = csv.writer(handle)
                if is_new:
                    writer.writerow(CSV_HEADER)
                writer.writerows(record.to_row() for record in records)
        except OSError as e:
            raise UsageSinkError(f"Cannot write usage log: {e}", details={"path": str(self.path)}) from e

    def clear(self) -> None:
        """Reset the file to the header row only.

        Raises:
            UsageSinkError: If the file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", newline="", encoding="utf-8") as handle:
                csv.writer(handle).writerow(CSV_HEADER)
        except OSError as e:
            raise UsageSinkError(f"Cannot clear usage log: {e}", details={"path": str(self.path)}) from e


class UsageRecorder:
    """Bounded FIFO of usage records.

    ``record`` never raises; once the buffer is full the oldest record is
    dropped. Records reach the sink only through an explicit ``flush``.
    """

    def __init__(self, sink: UsageSink, capacity: int = 100):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.sink = sink
        self.capacity = capacity
        self._buffer: deque[UsageRecord] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def record(
        self,
        model: str,
        provider: str,
        status: UsageStatus,
        elapsed_seconds: float = 0.0,
        token_count: int = 0,
        prompt: str = "",
    ) -> UsageRecord | None:
        """Buffer one usage record.

        Returns:
            The buffered record, or None if it could not be built
        """
        try:
            entry = UsageRecord(
                model=model or "",
                provider=provider or "",
                status=status,
                elapsed_seconds=max(0.0, float(elapsed_seconds or 0.0)),
                token_count=max(0, int(token_count or 0)),
                prompt=(prompt or "")[:PROMPT_PREVIEW_LENGTH],
            )
        except (TypeError, ValueError) as e:
            logger.warning("Usage record dropped", error=str(e))
            return None

        with self._lock:
            if len(self._buffer) == self.capacity:
                logger.debug("Usage buffer full, dropping oldest record", capacity=self.capacity)
            self._buffer.append(entry)
        return entry

    def flush(self) -> int:
        """Drain the buffer to the sink.

        Returns:
            Number of records written

        Raises:
            UsageSinkError: If the sink fails; the records go back to the buffer
        """
        with self._lock:
            drained = list(self._buffer)
            self._buffer.clear()

        if not drained:
            return 0

        try:
            self.sink.write(drained)
        except Exception as e:
            self._restore(drained)
            logger.error("Usage flush failed", records=len(drained), error=str(e))
            if isinstance(e, UsageSinkError):
                raise
            raise UsageSinkError(f"Usage sink failed: {e}") from e

        logger.info("Usage records flushed", records=len(drained))
        return len(drained)

    def _restore(self, drained: list[UsageRecord]) -> None:
        """Put drained records back ahead of anything recorded meanwhile."""
        with self._lock:
            newer = list(self._buffer)
            self._buffer.clear()
            # cap still applies: oldest go first
            for entry in drained + newer:
                self._buffer.append(entry)

    def clear_sink(self) -> None:
        """Reset the durable sink.

        Raises:
            UsageSinkError: If the sink cannot be cleared
        """
        self.sink.clear()
        logger.info("Usage sink cleared")

    def pending(self) -> list[UsageRecord]:
        """Snapshot of buffered records, oldest first."""
        with self._lock:
            return list(self._buffer)
