"""Redis-backed record store relying on native key expiry and GETDEL."""

from __future__ import annotations

from typing import TYPE_CHECKING

from redis.asyncio.retry import Retry
from redis.backoff import ExponentialBackoff
from redis.exceptions import ConnectionError, RedisError, TimeoutError

from .record_store import RecordStoreError

if TYPE_CHECKING:
    import redis.asyncio as aioredis

SOCKET_CONNECT_TIMEOUT = 2.0  # seconds
SOCKET_TIMEOUT = 2.0  # seconds
MAX_CONNECTIONS = 50
MAX_RETRIES = 2


def build_redis_client(redis_url: str) -> "aioredis.Redis":
    """Create an asyncio Redis client from a ``redis://`` connection string.

    Socket timeouts stay well under the per-request budget so a stalled
    server surfaces as a store failure rather than a request timeout.
    """
    import redis.asyncio as aioredis

    return aioredis.from_url(
        redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=SOCKET_CONNECT_TIMEOUT,
        socket_timeout=SOCKET_TIMEOUT,
        max_connections=MAX_CONNECTIONS,
        retry=Retry(ExponentialBackoff(), retries=MAX_RETRIES),
        retry_on_error=[ConnectionError, TimeoutError],
    )


class RedisRecordStore:
    """Record store delegating expiry and atomic consumption to Redis."""

    def __init__(self, redis: "aioredis.Redis") -> None:
        self._redis = redis

    @classmethod
    def from_url(cls, redis_url: str) -> "RedisRecordStore":
        return cls(build_redis_client(redis_url))

    async def set_ex(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self._redis.setex(key, ttl_seconds, value)
        except RedisError as exc:
            raise RecordStoreError(f"failed to store record: {exc}") from exc

    async def get_del(self, key: str) -> str | None:
        try:
            value = await self._redis.getdel(key)
        except RedisError as exc:
            raise RecordStoreError(f"failed to fetch record: {exc}") from exc
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value


__all__ = ["RedisRecordStore", "build_redis_client"]
