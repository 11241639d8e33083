"""Expose dependency helpers for FastAPI routers."""

from .clients import get_manifest_flow_service, get_record_store
from .config import SettingsDependency, get_app_settings

__all__ = [
    "SettingsDependency",
    "get_app_settings",
    "get_manifest_flow_service",
    "get_record_store",
]
