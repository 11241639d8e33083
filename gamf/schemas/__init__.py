"""Public schema exports."""

from .manifest import (
    CodeResponse,
    ErrorResponse,
    PendingManifest,
    StartRequest,
    StartResponse,
)

__all__ = [
    "CodeResponse",
    "ErrorResponse",
    "PendingManifest",
    "StartRequest",
    "StartResponse",
]
