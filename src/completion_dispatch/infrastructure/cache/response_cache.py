"""Best-effort response cache keyed by prompt, instruction and temperature."""

from __future__ import annotations

import hashlib
import json
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Protocol

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_TTL_SECONDS = 6 * 60 * 60
MAX_ENTRY_BYTES = 100_000


def make_cache_key(prompt: str, system_instruction: str | None, temperature: float) -> str:
    """SHA-256 hex digest of the normalized (prompt, instruction, temperature) triple.

    Candidates play no part in the key: an answer from any model is reused.
    """
    normalized = json.dumps([prompt, system_instruction or "", float(temperature)], ensure_ascii=False)
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


class TTLStore(Protocol):
    """Key/value store with per-entry expiry."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str, ttl_seconds: float) -> None: ...

    def clear(self) -> None: ...


class InMemoryTTLStore:
    """Process-local TTL store shared by concurrent requests.

    Expired entries are dropped on read. When ``max_entries`` is reached the
    least recently written entry is evicted.
    """

    def __init__(self, max_entries: int = 1000, clock: Callable[[], float] = time.time):
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, tuple[str, float]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: str, ttl_seconds: float) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = (value, self._clock() + ttl_seconds)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class ResponseCache:
    """Caches successful answers for a fixed TTL.

    Store failures are logged and ignored: a broken cache only costs a
    network call.
    """

    def __init__(
        self,
        store: TTLStore,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entry_bytes: int = MAX_ENTRY_BYTES,
    ):
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.max_entry_bytes = max_entry_bytes

    def get(self, key: str) -> str | None:
        """Return the cached answer, or None on miss or store error."""
        try:
            return self.store.get(key)
        except Exception as e:
            logger.warning("Cache read failed", error=str(e))
            return None

    def put(self, key: str, answer: str) -> bool:
        """Store an answer unless it is too large.

        Returns:
            True if the answer was stored
        """
        size = len(answer.encode("utf-8"))
        if size >= self.max_entry_bytes:
            logger.debug("Answer too large to cache", size_bytes=size, limit_bytes=self.max_entry_bytes)
            return False

        try:
            self.store.set(key, answer, self.ttl_seconds)
        except Exception as e:
            logger.warning("Cache write failed", error=str(e))
            return False
        return True

    def clear(self) -> None:
        """Drop every cached answer."""
        try:
            self.store.clear()
        except Exception as e:
            logger.warning("Cache clear failed", error=str(e))
            return
        logger.info("Response cache cleared")
