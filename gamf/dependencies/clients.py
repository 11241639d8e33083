"""
Factory functions to provide the record store and flow service as FastAPI
dependencies.
"""

import logging
from functools import lru_cache

from fastapi import Depends

from gamf.clients import InMemoryRecordStore, RecordStore, RedisRecordStore
from gamf.core.config import AppSettings
from gamf.services import ManifestFlowService

from .config import get_app_settings

logger = logging.getLogger(__name__)


@lru_cache()
def _build_record_store(backend: str, redis_url: str) -> RecordStore:
    if backend == "redis":
        logger.info("Using Redis record store")
        return RedisRecordStore.from_url(redis_url)
    logger.info("Using in-memory record store")
    return InMemoryRecordStore()


def get_record_store(settings: AppSettings = Depends(get_app_settings)) -> RecordStore:
    """Provide the process-wide record store selected by configuration."""
    return _build_record_store(settings.store.backend, settings.store.redis_url)


def get_manifest_flow_service(
    settings: AppSettings = Depends(get_app_settings),
    store: RecordStore = Depends(get_record_store),
) -> ManifestFlowService:
    """Build the handshake orchestrator around the shared store."""
    return ManifestFlowService(
        store=store,
        base_url=settings.base_url,
        initiation_ttl_seconds=settings.store.initiation_ttl_seconds,
        code_ttl_seconds=settings.store.code_ttl_seconds,
    )


__all__ = ["get_manifest_flow_service", "get_record_store"]
