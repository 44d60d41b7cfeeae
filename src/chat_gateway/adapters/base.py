"""
Shared HTTP plumbing for provider adapters.

Every vendor adapter is a codec plus endpoint/header details; the request
lifecycle, timeout policy and error mapping live here so each adapter
raises the same GatewayError types.
"""

import asyncio
import logging
from typing import Awaitable, Dict, List, Optional, Sequence, Set

import httpx

from ..codecs.base import WireCodec
from ..core.errors import (
    GatewayAuthenticationError,
    GatewayConnectionError,
    GatewayHTTPError,
    GatewayRateLimitError,
    GatewayTimeoutError,
    redact,
)
from ..core.interface import ChatProvider, ProviderCapability
from ..models.message import ApiError, Message, ProviderConfig
from ..models.stream import ChunkCallback, StreamChunk

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT = 30.0
DEFAULT_REQUEST_TIMEOUT = 120.0


class HttpChatProvider(ChatProvider):
    """
    Provider client talking JSON over HTTP.

    Subclasses set DEFAULT_BASE_URL, ENDPOINT, a codec and their auth
    headers. Each call opens its own AsyncClient and closes it when the call
    ends or is cancelled.
    """

    DEFAULT_BASE_URL = ""
    ENDPOINT = ""

    def __init__(
        self,
        config: ProviderConfig,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the adapter.

        Never fails: a bad key or model only shows up when a call is made.

        Args:
            config: Provider configuration for this call
            connect_timeout: Seconds allowed to establish the connection
            request_timeout: Seconds allowed for the whole request
            transport: Optional transport (tests pass httpx.MockTransport)
        """
        self.config = config
        self._base_url = (config.base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self._timeout = httpx.Timeout(request_timeout, connect=connect_timeout)
        self._request_timeout = request_timeout
        self._transport = transport
        self.codec = self.create_codec()

    def create_codec(self) -> WireCodec:
        raise NotImplementedError

    @property
    def capabilities(self) -> Set[ProviderCapability]:
        return {
            ProviderCapability.CHAT_COMPLETION,
            ProviderCapability.STREAMING,
        }

    @property
    def url(self) -> str:
        return f"{self._base_url}{self.ENDPOINT}"

    @property
    def _api_key(self) -> str:
        return self.config.api_key.get_secret_value()

    def auth_headers(self) -> Dict[str, str]:
        return {}

    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        headers.update(self.auth_headers())
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self.headers(),
            timeout=self._timeout,
            transport=self._transport,
        )

    async def send_blocking(self, history: Sequence[Message]) -> str:
        """Send the conversation and decode the complete response."""
        return await self._with_deadline(self._send_blocking(history))

    async def send_streaming(
        self,
        history: Sequence[Message],
        on_chunk: ChunkCallback,
    ) -> str:
        """Send the conversation and forward decoded chunks as they arrive."""
        return await self._with_deadline(self._send_streaming(history, on_chunk))

    async def _with_deadline(self, call: Awaitable[str]) -> str:
        # httpx timeouts bound each read; this bounds the whole call.
        try:
            return await asyncio.wait_for(call, self._request_timeout)
        except asyncio.TimeoutError:
            raise GatewayTimeoutError(
                f"Request timed out after {self._request_timeout:g}s",
                gateway=self.provider_type,
            )

    async def _send_blocking(self, history: Sequence[Message]) -> str:
        payload = self.codec.encode_request(history, self.config, streaming=False)

        async with self._client() as client:
            try:
                response = await client.post(self.url, json=payload)
            except httpx.RequestError as e:
                raise self._transport_error(e)

        self._check_response_errors(response.status_code, response.content, response.headers)
        return self.codec.decode_response(response.content)

    async def _send_streaming(
        self,
        history: Sequence[Message],
        on_chunk: ChunkCallback,
    ) -> str:
        payload = self.codec.encode_request(history, self.config, streaming=True)
        parts: List[str] = []
        finished = False

        async with self._client() as client:
            try:
                async with client.stream("POST", self.url, json=payload) as response:
                    if not 200 <= response.status_code < 300:
                        body = await response.aread()
                        self._check_response_errors(response.status_code, body, response.headers)

                    try:
                        async for chunk in self.codec.decode_stream(response.aiter_bytes()):
                            if chunk.is_done:
                                finished = True
                                break
                            if chunk.text:
                                parts.append(chunk.text)
                                on_chunk(chunk)
                    except GatewayHTTPError as e:
                        raise self._api_error(
                            response.status_code, e.api_error or ApiError(), response.headers
                        ) from None
            except httpx.RequestError as e:
                raise self._transport_error(e)

        if not finished:
            logger.warning(
                f"{self.provider_type} stream closed without a terminal event; "
                f"finishing with {len(parts)} chunks"
            )
        on_chunk(StreamChunk.done())
        return "".join(parts)

    def _transport_error(self, exc: httpx.RequestError) -> GatewayConnectionError:
        message = redact(str(exc), self._api_key) or exc.__class__.__name__
        if isinstance(exc, httpx.TimeoutException):
            return GatewayTimeoutError(
                f"Request timed out: {message}", gateway=self.provider_type
            )
        return GatewayConnectionError(
            f"Request failed: {message}", gateway=self.provider_type
        )

    def _check_response_errors(
        self,
        status_code: int,
        body: bytes,
        headers: httpx.Headers,
    ) -> None:
        """Check response status and raise the matching HTTP error."""
        if 200 <= status_code < 300:
            return
        raise self._api_error(status_code, self.codec.decode_error(status_code, body), headers)

    def _api_error(
        self,
        status_code: int,
        api_error: ApiError,
        headers: httpx.Headers,
    ) -> GatewayHTTPError:
        """Build the HTTP error for a vendor error, scrubbed of the API key."""
        api_error = api_error.model_copy(
            update={"message": redact(api_error.message, self._api_key)}
        )
        message = f"{status_code} {api_error.category}: {api_error.message}"

        if status_code in (401, 403):
            return GatewayAuthenticationError(
                message,
                gateway=self.provider_type,
                status_code=status_code,
                api_error=api_error,
            )

        if status_code == 429:
            retry_after = headers.get("retry-after")
            try:
                retry_after = float(retry_after) if retry_after else None
            except ValueError:
                retry_after = None
            return GatewayRateLimitError(
                message,
                gateway=self.provider_type,
                api_error=api_error,
                retry_after=retry_after,
            )

        return GatewayHTTPError(
            message,
            gateway=self.provider_type,
            status_code=status_code,
            api_error=api_error,
        )
