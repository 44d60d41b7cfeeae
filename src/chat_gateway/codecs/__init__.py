"""
Wire codecs for vendor chat APIs.
"""

from .anthropic import AnthropicCodec
from .base import LineBuffer, WireCodec
from .openai import OpenAICodec

__all__ = [
    "AnthropicCodec",
    "LineBuffer",
    "OpenAICodec",
    "WireCodec",
]
