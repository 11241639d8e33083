"""Cryptographically random one-time tokens."""

from __future__ import annotations

import secrets

TOKEN_BYTES = 32


class TokenGenerationError(Exception):
    """Raised when the operating system's random source is unavailable."""


def generate_token() -> str:
    """Return 256 bits from the OS CSPRNG as 64 lowercase hex characters."""
    try:
        return secrets.token_hex(TOKEN_BYTES)
    except (OSError, NotImplementedError) as exc:
        raise TokenGenerationError("error generating token") from exc


__all__ = ["TOKEN_BYTES", "TokenGenerationError", "generate_token"]
