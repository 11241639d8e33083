try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import itertools
import json

import pytest

from gamf.clients import InMemoryRecordStore
from gamf.schemas import PendingManifest, StartRequest
from gamf.services import (
    CorruptRecordError,
    ManifestFlowService,
    TokenGenerationError,
    action_url,
)
from gamf.services.manifest_flow import INITIATION_PREFIX, STATE_PREFIX

pytestmark = pytest.mark.anyio


class RecordingStore(InMemoryRecordStore):
    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.writes: list[tuple[str, str, int]] = []

    async def set_ex(self, key: str, value: str, ttl_seconds: int) -> None:
        self.writes.append((key, value, ttl_seconds))
        await super().set_ex(key, value, ttl_seconds)


def _sequential_tokens():
    counter = itertools.count()
    return lambda: f"token-{next(counter)}"


def _request(**overrides) -> StartRequest:
    payload = {
        "manifest": {"name": "demo"},
        "target_type": "user",
        "target_slug": "alice",
        "host": "github.example",
    }
    payload.update(overrides)
    return StartRequest(**payload)


async def test_start_stores_pending_manifest_under_initiation_token() -> None:
    store = RecordingStore()
    service = ManifestFlowService(
        store=store,
        base_url="https://gamf.test/",
        token_factory=_sequential_tokens(),
    )

    response = await service.start(_request())

    assert response.key == "token-1"
    assert response.url == "https://gamf.test/redirect/token-0"
    key, value, ttl = store.writes[0]
    assert key == f"{INITIATION_PREFIX}token-0"
    assert ttl == 600
    stored = json.loads(value)
    assert stored["state"] == "token-1"
    assert stored["manifest"] == {
        "name": "demo",
        "redirect_url": "https://gamf.test/callback",
    }


async def test_start_writes_nothing_when_token_generation_fails() -> None:
    store = RecordingStore()
    calls = []

    def failing_second_token() -> str:
        calls.append(None)
        if len(calls) == 2:
            raise TokenGenerationError("no entropy")
        return "initiation"

    service = ManifestFlowService(
        store=store, base_url="https://gamf.test", token_factory=failing_second_token
    )

    with pytest.raises(TokenGenerationError):
        await service.start(_request())
    assert store.writes == []


async def test_redeem_manifest_is_single_use() -> None:
    service = ManifestFlowService(
        store=InMemoryRecordStore(),
        base_url="https://gamf.test",
        token_factory=_sequential_tokens(),
    )
    await service.start(_request())

    pending = await service.redeem_manifest("token-0")

    assert pending is not None
    assert pending.state == "token-1"
    assert await service.redeem_manifest("token-0") is None


async def test_state_token_cannot_redeem_the_manifest() -> None:
    service = ManifestFlowService(
        store=InMemoryRecordStore(),
        base_url="https://gamf.test",
        token_factory=_sequential_tokens(),
    )
    response = await service.start(_request())

    assert await service.redeem_manifest(response.key) is None
    assert await service.redeem_code(response.key) is None


async def test_pending_manifest_expires(clock) -> None:
    service = ManifestFlowService(
        store=InMemoryRecordStore(clock=clock),
        base_url="https://gamf.test",
        token_factory=_sequential_tokens(),
        initiation_ttl_seconds=600,
    )
    await service.start(_request())
    clock.advance(600)

    assert await service.redeem_manifest("token-0") is None


async def test_code_round_trip_is_single_use(clock) -> None:
    store = RecordingStore(clock=clock)
    service = ManifestFlowService(store=store, base_url="https://gamf.test")

    await service.store_code("state-token", "XYZ")

    assert store.writes == [(f"{STATE_PREFIX}state-token", "XYZ", 300)]
    assert await service.redeem_code("state-token") == "XYZ"
    assert await service.redeem_code("state-token") is None


async def test_code_expires_after_five_minutes(clock) -> None:
    service = ManifestFlowService(
        store=InMemoryRecordStore(clock=clock), base_url="https://gamf.test"
    )
    await service.store_code("state-token", "XYZ")
    clock.advance(300)

    assert await service.redeem_code("state-token") is None


@pytest.mark.parametrize("state, code", [("", "XYZ"), ("state", ""), ("", "")])
async def test_store_code_rejects_empty_values(state: str, code: str) -> None:
    store = RecordingStore()
    service = ManifestFlowService(store=store, base_url="https://gamf.test")

    with pytest.raises(ValueError):
        await service.store_code(state, code)
    assert store.writes == []


async def test_corrupt_record_raises() -> None:
    store = InMemoryRecordStore()
    await store.set_ex(f"{INITIATION_PREFIX}broken", "not-json", 60)
    service = ManifestFlowService(store=store, base_url="https://gamf.test")

    with pytest.raises(CorruptRecordError):
        await service.redeem_manifest("broken")


def _pending(target_type: str, slug: str = "acme") -> PendingManifest:
    return PendingManifest(
        manifest={},
        target_type=target_type,
        target_slug=slug,
        host="github.example",
        state="S",
    )


def test_action_url_for_organization() -> None:
    assert (
        action_url(_pending("org"))
        == "https://github.example/organizations/acme/settings/apps/new?state=S"
    )


@pytest.mark.parametrize("target_type", ["user", "enterprise", ""])
def test_action_url_defaults_to_individual_account(target_type: str) -> None:
    assert (
        action_url(_pending(target_type))
        == "https://github.example/settings/apps/new?state=S"
    )
