"""Contract shared by the ephemeral record store implementations."""

from __future__ import annotations

from typing import Protocol


class RecordStoreError(Exception):
    """Raised when the backing store fails to complete an operation."""


class RecordStore(Protocol):
    """Short-lived key/value records with an atomic fetch-and-invalidate.

    ``get_del`` returns ``None`` for a key that was never written, has
    expired or was already consumed; only transport or operational failures
    raise ``RecordStoreError``.
    """

    async def set_ex(self, key: str, value: str, ttl_seconds: int) -> None:
        """Install or overwrite ``key`` so that it expires after ``ttl_seconds``."""
        ...

    async def get_del(self, key: str) -> str | None:
        """Atomically read and remove ``key``; at most one caller sees the value."""
        ...


__all__ = ["RecordStore", "RecordStoreError"]
