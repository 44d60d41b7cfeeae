"""
Core gateway components.
"""

from .interface import ChatProvider, ProviderCapability
from .registry import ProviderRegistry, create_default_registry, get_registry
from .config import AppConfig, ProviderSettings, load_config
from .history import ConversationState, ConversationStore
from .errors import (
    ErrorKind,
    GatewayError,
    GatewayNotFoundError,
    GatewayConnectionError,
    GatewayTimeoutError,
    GatewayHTTPError,
    GatewayAuthenticationError,
    GatewayRateLimitError,
    GatewayDecodeError,
    GatewayInvalidRequestError,
    NoValidProvidersError,
    AllProvidersFailedError,
)

__all__ = [
    "ChatProvider",
    "ProviderCapability",
    "ProviderRegistry",
    "create_default_registry",
    "get_registry",
    "AppConfig",
    "ProviderSettings",
    "load_config",
    "ConversationState",
    "ConversationStore",
    "ErrorKind",
    "GatewayError",
    "GatewayNotFoundError",
    "GatewayConnectionError",
    "GatewayTimeoutError",
    "GatewayHTTPError",
    "GatewayAuthenticationError",
    "GatewayRateLimitError",
    "GatewayDecodeError",
    "GatewayInvalidRequestError",
    "NoValidProvidersError",
    "AllProvidersFailedError",
]
