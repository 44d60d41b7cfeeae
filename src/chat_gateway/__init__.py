"""
Provider Gateway

A capability-based interface over hosted chat-model APIs:
- Unified message/config/stream-chunk models
- Vendor wire codecs with incremental event-stream decoding
- Registry of provider adapters (Anthropic, OpenAI, OpenRouter)
- Concurrent fan-out of one user turn to several models
"""

from .core.interface import ChatProvider, ProviderCapability
from .core.registry import ProviderRegistry, create_default_registry
from .core.config import AppConfig, ProviderSettings, load_config
from .core.history import ConversationState
from .core.errors import ErrorKind, GatewayError
from .models.message import ApiError, Message, ModelSelection, ProviderConfig, Role
from .models.stream import StreamChunk
from .orchestrator import GatewayOrchestrator, TargetOutcome, TargetStatus, TurnResult

__all__ = [
    "ChatProvider",
    "ProviderCapability",
    "ProviderRegistry",
    "create_default_registry",
    "AppConfig",
    "ProviderSettings",
    "load_config",
    "ConversationState",
    "ErrorKind",
    "GatewayError",
    "ApiError",
    "Message",
    "ModelSelection",
    "ProviderConfig",
    "Role",
    "StreamChunk",
    "GatewayOrchestrator",
    "TargetOutcome",
    "TargetStatus",
    "TurnResult",
]
