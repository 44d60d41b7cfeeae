"""
OpenRouter adapter.

OpenRouter exposes the OpenAI Chat Completions wire format in front of
many upstream vendors; model ids are namespaced ("anthropic/claude-3-opus").
"""

from typing import Dict, Optional

import httpx

from ..models.message import ProviderConfig
from .base import DEFAULT_CONNECT_TIMEOUT, DEFAULT_REQUEST_TIMEOUT
from .openai_adapter import OpenAIAdapter


class OpenRouterAdapter(OpenAIAdapter):
    """OpenRouter uses the OpenAI-compatible API surface."""

    DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"

    def __init__(
        self,
        config: ProviderConfig,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        app_url: Optional[str] = None,
        app_title: Optional[str] = None,
    ):
        """
        Initialize OpenRouter adapter.

        Args:
            app_url: Sent as HTTP-Referer for OpenRouter app attribution
            app_title: Sent as X-Title for OpenRouter app attribution
        """
        super().__init__(
            config,
            connect_timeout=connect_timeout,
            request_timeout=request_timeout,
            transport=transport,
        )
        self._app_url = app_url
        self._app_title = app_title

    @property
    def provider_type(self) -> str:
        return "openrouter"

    def auth_headers(self) -> Dict[str, str]:
        headers = super().auth_headers()
        if self._app_url:
            headers["HTTP-Referer"] = self._app_url
        if self._app_title:
            headers["X-Title"] = self._app_title
        return headers
