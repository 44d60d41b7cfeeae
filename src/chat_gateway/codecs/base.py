"""
Wire codec contract and shared event-stream framing.

A codec translates normalized messages into a vendor request payload and
turns the vendor's response bytes back into text or StreamChunks. It does
no I/O itself.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, AsyncIterable, AsyncIterator, Dict, List, Optional, Sequence

from ..core.errors import GatewayDecodeError, GatewayHTTPError, GatewayInvalidRequestError
from ..models.message import ApiError, Message, ProviderConfig, Role
from ..models.stream import StreamChunk

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


class LineBuffer:
    """
    Reassembles newline-terminated lines from arbitrary byte buffers.

    Bytes after the last newline are carried over to the next feed. Lines
    are decoded only once complete, so a multi-byte character split across
    two buffers is never mangled.
    """

    def __init__(self):
        self._pending = bytearray()

    def feed(self, data: bytes) -> List[str]:
        """Add bytes and return every line completed by them."""
        # Only the new bytes are scanned; pending bytes hold no newline.
        if b"\n" not in data:
            self._pending.extend(data)
            return []
        *complete, rest = (bytes(self._pending) + data).split(b"\n")
        self._pending = bytearray(rest)
        return [line.decode("utf-8", errors="replace").strip() for line in complete]

    @property
    def pending(self) -> bytes:
        return bytes(self._pending)


class WireCodec(ABC):
    """
    Vendor request/response translation.

    Subclasses implement the payload shape and per-event parsing; framing
    of the event stream is shared.
    """

    vendor: str = ""

    # Event "type" values that end the logical stream.
    end_event_types: frozenset = frozenset()

    @abstractmethod
    def build_payload(
        self,
        messages: List[Dict[str, str]],
        config: ProviderConfig,
        streaming: bool,
    ) -> Dict[str, Any]:
        """Wrap already-mapped messages in the vendor's request body."""
        pass

    @abstractmethod
    def parse_event(self, event: Dict[str, Any]) -> Optional[StreamChunk]:
        """
        Convert one decoded stream event.

        Returns:
            A text chunk, or None for events that carry no text
        """
        pass

    @abstractmethod
    def extract_text(self, body: Dict[str, Any]) -> str:
        """Pull the assistant text out of a complete response body."""
        pass

    @abstractmethod
    def extract_error(self, body: Any) -> Optional[ApiError]:
        """Read the vendor's structured error shape, or None if absent."""
        pass

    def encode_request(
        self,
        history: Sequence[Message],
        config: ProviderConfig,
        streaming: bool,
    ) -> Dict[str, Any]:
        """
        Build the request payload for a completion call.

        Args:
            history: Conversation so far, ending with the new user turn
            config: Provider configuration (model, max_tokens)
            streaming: Whether to ask for an event stream

        Returns:
            JSON-serializable request body
        """
        if not history:
            raise GatewayInvalidRequestError(
                "Cannot send an empty conversation", gateway=self.vendor
            )
        messages = [{"role": Role(m.role).value, "content": m.content} for m in history]
        return self.build_payload(messages, config, streaming)

    def is_end_event(self, event: Dict[str, Any]) -> bool:
        return event.get("type") in self.end_event_types

    def stream_error(self, event: Dict[str, Any]) -> Optional[ApiError]:
        """Vendor error reported inside an open stream, or None."""
        return None

    async def decode_stream(
        self,
        byte_chunks: AsyncIterable[bytes],
    ) -> AsyncIterator[StreamChunk]:
        """
        Decode an event stream into StreamChunks.

        Only "data: " lines carry payload. "[DONE]" or an end-of-turn event
        yields a single terminal chunk and stops. Malformed JSON lines are
        skipped. A vendor error event raises GatewayHTTPError. If the bytes
        run out first, no terminal chunk is produced; the caller decides how
        to finish.
        """
        buffer = LineBuffer()
        async for raw in byte_chunks:
            for line in buffer.feed(raw):
                if not line.startswith(DATA_PREFIX):
                    continue
                data = line[len(DATA_PREFIX):].strip()
                if data == DONE_SENTINEL:
                    yield StreamChunk.done()
                    return
                try:
                    event = json.loads(data)
                except json.JSONDecodeError:
                    logger.debug(f"Skipping malformed {self.vendor} stream line: {data[:200]}")
                    continue
                if not isinstance(event, dict):
                    continue
                api_error = self.stream_error(event)
                if api_error is not None:
                    raise GatewayHTTPError(
                        f"Stream error {api_error.category}: {api_error.message}",
                        gateway=self.vendor,
                        api_error=api_error,
                    )
                if self.is_end_event(event):
                    yield StreamChunk.done()
                    return
                chunk = self.parse_event(event)
                if chunk is not None:
                    yield chunk

        if buffer.pending.strip():
            logger.debug(f"Discarding unterminated {self.vendor} stream line")

    def decode_response(self, body: bytes) -> str:
        """Decode a non-streaming response body to its full text."""
        try:
            data = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise GatewayDecodeError(
                f"Invalid JSON in response body: {e}", gateway=self.vendor
            )
        if not isinstance(data, dict):
            raise GatewayDecodeError("Response body is not an object", gateway=self.vendor)
        return self.extract_text(data)

    def decode_error(self, status: int, body: bytes) -> ApiError:
        """Decode an error response body into a category and message."""
        text = body.decode("utf-8", errors="replace")
        try:
            parsed = self.extract_error(json.loads(text))
        except json.JSONDecodeError:
            parsed = None
        if parsed is not None:
            return parsed
        return ApiError(category="Unknown", message=text or f"HTTP {status}")
