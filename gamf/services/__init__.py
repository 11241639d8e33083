"""Service layer exports."""

from .manifest_flow import CorruptRecordError, ManifestFlowService, action_url
from .tokens import TokenGenerationError, generate_token

__all__ = [
    "CorruptRecordError",
    "ManifestFlowService",
    "TokenGenerationError",
    "action_url",
    "generate_token",
]
