"""
Provider registry for constructing provider clients.
"""

import logging
from typing import Any, Dict, List, Optional, Type

import httpx

from ..models.message import ProviderConfig
from .errors import GatewayNotFoundError
from .interface import ChatProvider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """
    Registry of provider adapter classes.

    Maps a provider id to the adapter class that serves it. Creating a
    client is pure construction; no network I/O happens here.
    """

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        client_options: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the registry.

        Args:
            transport: Transport handed to every client (tests use MockTransport)
            client_options: Extra keyword arguments for every client (timeouts)
        """
        self._adapters: Dict[str, Type[ChatProvider]] = {}
        self._transport = transport
        self._client_options = dict(client_options or {})

    def register_adapter(
        self,
        provider_id: str,
        adapter_class: Type[ChatProvider],
    ) -> None:
        """
        Register a provider adapter class.

        Args:
            provider_id: Provider identifier (e.g., "anthropic", "openai")
            adapter_class: Adapter class to register
        """
        self._adapters[provider_id] = adapter_class
        logger.info(f"Registered provider adapter: {provider_id}")

    def unregister_adapter(self, provider_id: str) -> None:
        if provider_id not in self._adapters:
            raise GatewayNotFoundError(f"Unknown provider type: {provider_id}")
        del self._adapters[provider_id]

    def is_registered(self, provider_id: str) -> bool:
        return provider_id in self._adapters

    def list_providers(self) -> List[str]:
        return sorted(self._adapters)

    def create(self, provider_id: str, config: ProviderConfig) -> ChatProvider:
        """
        Create a provider client for one call.

        Args:
            provider_id: Registered provider identifier
            config: Configuration for the client

        Returns:
            Configured provider client

        Raises:
            GatewayNotFoundError: If the provider id is not registered
        """
        if provider_id not in self._adapters:
            raise GatewayNotFoundError(
                f"Unknown provider type: {provider_id}", gateway=provider_id
            )

        adapter_class = self._adapters[provider_id]
        options = dict(self._client_options)
        if self._transport is not None:
            options["transport"] = self._transport
        return adapter_class(config, **options)


def create_default_registry(
    transport: Optional[httpx.AsyncBaseTransport] = None,
    client_options: Optional[Dict[str, Any]] = None,
) -> ProviderRegistry:
    """Build a registry with every bundled vendor registered."""
    from ..adapters import AnthropicAdapter, OpenAIAdapter, OpenRouterAdapter

    registry = ProviderRegistry(transport=transport, client_options=client_options)
    registry.register_adapter("anthropic", AnthropicAdapter)
    registry.register_adapter("openai", OpenAIAdapter)
    registry.register_adapter("openrouter", OpenRouterAdapter)
    return registry


# Global registry instance
_registry: Optional[ProviderRegistry] = None


def get_registry() -> ProviderRegistry:
    """Get the global provider registry."""
    global _registry
    if _registry is None:
        _registry = create_default_registry()
    return _registry
