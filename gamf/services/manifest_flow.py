"""
Orchestration of the GitHub App Manifest handshake.

The flow spans four independent HTTP interactions. All state between them
lives in the record store under two token namespaces:

* ``i:<initiation token>`` holds the pending manifest from ``start`` until the
  browser redirect consumes it.
* ``s:<state token>`` holds the code GitHub returns from the callback until
  the caller redeems it.

Both records are single use: they are removed by the read that returns them.
"""

from __future__ import annotations

import logging
from typing import Callable

from pydantic import ValidationError

from gamf.clients.record_store import RecordStore
from gamf.schemas import PendingManifest, StartRequest, StartResponse
from gamf.services.tokens import generate_token

logger = logging.getLogger(__name__)

INITIATION_PREFIX = "i:"
STATE_PREFIX = "s:"
DEFAULT_INITIATION_TTL_SECONDS = 10 * 60
DEFAULT_CODE_TTL_SECONDS = 5 * 60


class CorruptRecordError(Exception):
    """Raised when a stored pending manifest cannot be decoded."""


def action_url(pending: PendingManifest) -> str:
    """Return GitHub's app-creation endpoint for the pending manifest's target."""
    if pending.target_type == "org":
        return (
            f"https://{pending.host}/organizations/{pending.target_slug}"
            f"/settings/apps/new?state={pending.state}"
        )
    return f"https://{pending.host}/settings/apps/new?state={pending.state}"


class ManifestFlowService:
    """Drive the start, redirect, callback and code phases over a record store."""

    def __init__(
        self,
        *,
        store: RecordStore,
        base_url: str,
        token_factory: Callable[[], str] = generate_token,
        initiation_ttl_seconds: int = DEFAULT_INITIATION_TTL_SECONDS,
        code_ttl_seconds: int = DEFAULT_CODE_TTL_SECONDS,
    ) -> None:
        self._store = store
        self._base_url = base_url.rstrip("/")
        self._token_factory = token_factory
        self._initiation_ttl = initiation_ttl_seconds
        self._code_ttl = code_ttl_seconds

    @property
    def callback_url(self) -> str:
        return f"{self._base_url}/callback"

    async def start(self, request: StartRequest) -> StartResponse:
        """
        Persist the manifest under a fresh initiation token.

        Both tokens are drawn before anything is written, so a failing random
        source leaves no partial record behind. The state token is returned to
        the caller as ``key`` and only reaches GitHub through the stored record.
        """
        initiation_token = self._token_factory()
        state_token = self._token_factory()

        manifest = dict(request.manifest)
        manifest["redirect_url"] = self.callback_url
        pending = PendingManifest(
            manifest=manifest,
            target_type=request.target_type,
            target_slug=request.target_slug,
            host=request.host,
            state=state_token,
        )

        await self._store.set_ex(
            INITIATION_PREFIX + initiation_token,
            pending.model_dump_json(),
            self._initiation_ttl,
        )
        logger.info(
            "Started manifest flow for %s %s on %s",
            request.target_type,
            request.target_slug,
            request.host,
        )
        return StartResponse(
            key=state_token,
            url=f"{self._base_url}/redirect/{initiation_token}",
        )

    async def redeem_manifest(self, initiation_token: str) -> PendingManifest | None:
        """Consume the pending manifest, or return ``None`` if there is none."""
        raw = await self._store.get_del(INITIATION_PREFIX + initiation_token)
        if raw is None:
            return None
        try:
            return PendingManifest.model_validate_json(raw)
        except ValidationError as exc:
            raise CorruptRecordError("stored manifest could not be decoded") from exc

    async def store_code(self, state: str, code: str) -> None:
        """Hold GitHub's manifest code until the caller polls for it."""
        if not state or not code:
            raise ValueError("state and code are both required")
        await self._store.set_ex(STATE_PREFIX + state, code, self._code_ttl)

    async def redeem_code(self, state: str) -> str | None:
        """Consume the code stored for ``state``, or return ``None``."""
        return await self._store.get_del(STATE_PREFIX + state)


__all__ = [
    "CorruptRecordError",
    "DEFAULT_CODE_TTL_SECONDS",
    "DEFAULT_INITIATION_TTL_SECONDS",
    "INITIATION_PREFIX",
    "ManifestFlowService",
    "STATE_PREFIX",
    "action_url",
]
