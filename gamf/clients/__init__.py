"""Expose record store implementations."""

from .memory_store import InMemoryRecordStore
from .record_store import RecordStore, RecordStoreError
from .redis_store import RedisRecordStore, build_redis_client

__all__ = [
    "InMemoryRecordStore",
    "RecordStore",
    "RecordStoreError",
    "RedisRecordStore",
    "build_redis_client",
]
