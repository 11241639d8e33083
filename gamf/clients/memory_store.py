"""Process-local record store guarded by a mutex."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict


@dataclass(slots=True, frozen=True)
class _Entry:
    value: str
    expires_at: float


class InMemoryRecordStore:
    """Dictionary-backed record store with lazy, access-time expiry.

    Every read-modify-write happens under a single lock, so concurrent
    ``get_del`` calls for the same key hand the value to exactly one caller.
    ``clock`` must be monotonic; it is injectable so expiry can be tested
    without sleeping.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        sweep_threshold: int = 1024,
    ) -> None:
        self._clock = clock
        self._sweep_threshold = sweep_threshold
        self._lock = threading.Lock()
        self._entries: Dict[str, _Entry] = {}

    async def set_ex(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            now = self._clock()
            if len(self._entries) >= self._sweep_threshold:
                self._purge_locked(now)
            self._entries[key] = _Entry(value=value, expires_at=now + ttl_seconds)

    async def get_del(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.pop(key, None)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                return None
            return entry.value

    def purge_expired(self) -> int:
        """Drop every expired record and return how many were removed."""
        with self._lock:
            return self._purge_locked(self._clock())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _purge_locked(self, now: float) -> int:
        expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)


__all__ = ["InMemoryRecordStore"]
