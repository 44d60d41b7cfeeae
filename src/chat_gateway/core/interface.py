"""
Provider client interface definition.

Defines the contract that all provider adapters must implement.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Sequence, Set

from ..models.message import Message
from ..models.stream import ChunkCallback


class ProviderCapability(str, Enum):
    """Capabilities that a provider may support."""
    CHAT_COMPLETION = "chat_completion"
    STREAMING = "streaming"


class ChatProvider(ABC):
    """
    Abstract base class for chat provider clients.

    A client executes one logical chat turn against one vendor. Clients are
    cheap to construct and hold no connection between calls.
    """

    @property
    @abstractmethod
    def provider_type(self) -> str:
        """
        Vendor identifier (e.g., "anthropic", "openai").

        Returns:
            Provider type identifier
        """
        pass

    @property
    @abstractmethod
    def capabilities(self) -> Set[ProviderCapability]:
        """
        Set of capabilities this provider supports.

        Returns:
            Set of ProviderCapability values
        """
        pass

    @abstractmethod
    async def send_blocking(self, history: Sequence[Message]) -> str:
        """
        Send the conversation and wait for the complete reply.

        Args:
            history: Conversation ending with the new user turn

        Returns:
            Full assistant text
        """
        pass

    @abstractmethod
    async def send_streaming(
        self,
        history: Sequence[Message],
        on_chunk: ChunkCallback,
    ) -> str:
        """
        Send the conversation and stream the reply.

        on_chunk receives every non-empty text chunk in stream order, then
        exactly one terminal chunk.

        Args:
            history: Conversation ending with the new user turn
            on_chunk: Called synchronously for each chunk

        Returns:
            Full assistant text
        """
        pass

    def supports(self, capability: ProviderCapability) -> bool:
        """
        Check if provider supports a capability.

        Args:
            capability: Capability to check

        Returns:
            True if supported
        """
        return capability in self.capabilities

    def supports_streaming(self) -> bool:
        return self.supports(ProviderCapability.STREAMING)

    async def send(
        self,
        history: Sequence[Message],
        on_chunk: Optional[ChunkCallback] = None,
        streaming: bool = True,
    ) -> str:
        """
        Single entry point used by the orchestrator.

        Streams only when the provider supports it, a callback was given and
        the caller's policy allows it; otherwise sends blocking.
        """
        if self.supports_streaming() and on_chunk is not None and streaming:
            return await self.send_streaming(history, on_chunk)
        return await self.send_blocking(history)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(type={self.provider_type!r})"
