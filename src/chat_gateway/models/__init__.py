"""
Gateway data models.
"""

from .message import ApiError, Message, ModelSelection, ProviderConfig, Role
from .stream import ChunkCallback, StreamChunk

__all__ = [
    "ApiError",
    "ChunkCallback",
    "Message",
    "ModelSelection",
    "ProviderConfig",
    "Role",
    "StreamChunk",
]
