"""
Provider adapters for hosted chat APIs.
"""

from .base import HttpChatProvider
from .anthropic_adapter import AnthropicAdapter
from .openai_adapter import OpenAIAdapter
from .openrouter_adapter import OpenRouterAdapter

__all__ = [
    "HttpChatProvider",
    "AnthropicAdapter",
    "OpenAIAdapter",
    "OpenRouterAdapter",
]
