"""
Direct OpenAI API adapter.

Provides access to OpenAI's Chat Completions API.
"""

from typing import Dict

from ..codecs.openai import OpenAICodec
from .base import HttpChatProvider


class OpenAIAdapter(HttpChatProvider):
    """
    Direct OpenAI API adapter.

    Connects directly to OpenAI's API for chat completions.
    """

    DEFAULT_BASE_URL = "https://api.openai.com/v1"
    ENDPOINT = "/chat/completions"

    @property
    def provider_type(self) -> str:
        return "openai"

    def create_codec(self) -> OpenAICodec:
        return OpenAICodec(vendor=self.provider_type)

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}"}
