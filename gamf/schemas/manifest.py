"""Schemas for the manifest handshake endpoints and stored records."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field


class StartRequest(BaseModel):
    """Body accepted by ``POST /start``."""

    manifest: Dict[str, Any] = Field(
        ...,
        description="GitHub App manifest object, passed through to GitHub untouched.",
    )
    target_type: str = Field(
        ...,
        description="Account type owning the new app: 'user' or 'org'.",
    )
    target_slug: str = Field(..., description="Account slug to create the app on.")
    host: str = Field(..., description="GitHub instance host, usually github.com.")


class PendingManifest(StartRequest):
    """Record held under the initiation token until the browser redirect."""

    state: str = Field(
        ...,
        description="State token forwarded to GitHub and used to poll for the code.",
    )


class StartResponse(BaseModel):
    key: str = Field(..., description="One-time key used to retrieve the code.")
    url: str = Field(..., description="URL the browser must visit to begin the flow.")


class CodeResponse(BaseModel):
    code: str = Field(..., description="GitHub manifest code to exchange for app credentials.")


class ErrorResponse(BaseModel):
    error: str


__all__ = [
    "CodeResponse",
    "ErrorResponse",
    "PendingManifest",
    "StartRequest",
    "StartResponse",
]
