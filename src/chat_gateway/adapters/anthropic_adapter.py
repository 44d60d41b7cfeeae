"""
Direct Anthropic API adapter.

Provides access to Anthropic's Claude Messages API.
"""

from typing import Dict

from ..codecs.anthropic import AnthropicCodec
from .base import HttpChatProvider


class AnthropicAdapter(HttpChatProvider):
    """
    Direct Anthropic API adapter.

    Authenticates with the x-api-key header and pins the API version.
    """

    DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
    ENDPOINT = "/messages"
    ANTHROPIC_VERSION = "2023-06-01"

    @property
    def provider_type(self) -> str:
        return "anthropic"

    def create_codec(self) -> AnthropicCodec:
        return AnthropicCodec()

    def auth_headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self._api_key,
            "anthropic-version": self.ANTHROPIC_VERSION,
        }
