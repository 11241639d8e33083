try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from gamf.clients import InMemoryRecordStore

pytestmark = pytest.mark.anyio


async def test_get_del_returns_value_once(clock) -> None:
    store = InMemoryRecordStore(clock=clock)
    await store.set_ex("i:abc", "payload", 60)

    assert await store.get_del("i:abc") == "payload"
    assert await store.get_del("i:abc") is None


async def test_get_del_unknown_key_is_absent(clock) -> None:
    store = InMemoryRecordStore(clock=clock)

    assert await store.get_del("never-written") is None
    assert await store.get_del("never-written") is None


async def test_record_expires_at_ttl_boundary(clock) -> None:
    store = InMemoryRecordStore(clock=clock)
    await store.set_ex("early", "value", 10)
    await store.set_ex("late", "value", 10)

    clock.advance(9.999)
    assert await store.get_del("early") == "value"

    clock.advance(0.001)
    assert await store.get_del("late") is None
    assert len(store) == 0


async def test_set_ex_overwrites_and_resets_expiry(clock) -> None:
    store = InMemoryRecordStore(clock=clock)
    await store.set_ex("key", "first", 5)
    clock.advance(4)
    await store.set_ex("key", "second", 5)
    clock.advance(4)

    assert await store.get_del("key") == "second"


async def test_concurrent_tasks_redeem_once(clock) -> None:
    store = InMemoryRecordStore(clock=clock)
    await store.set_ex("shared", "secret", 60)

    results = await asyncio.gather(*(store.get_del("shared") for _ in range(50)))

    assert results.count("secret") == 1
    assert results.count(None) == 49


def test_concurrent_threads_redeem_once() -> None:
    store = InMemoryRecordStore()
    asyncio.run(store.set_ex("shared", "secret", 60))

    def redeem(_: int) -> str | None:
        return asyncio.run(store.get_del("shared"))

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(redeem, range(64)))

    assert results.count("secret") == 1
    assert results.count(None) == 63


async def test_purge_expired_drops_only_expired_records(clock) -> None:
    store = InMemoryRecordStore(clock=clock)
    await store.set_ex("short", "a", 1)
    await store.set_ex("long", "b", 100)
    clock.advance(2)

    assert store.purge_expired() == 1
    assert len(store) == 1
    assert await store.get_del("long") == "b"


async def test_writes_sweep_expired_records_past_threshold(clock) -> None:
    store = InMemoryRecordStore(clock=clock, sweep_threshold=3)
    for index in range(3):
        await store.set_ex(f"stale-{index}", "x", 1)
    clock.advance(5)

    await store.set_ex("fresh", "y", 60)

    assert len(store) == 1
