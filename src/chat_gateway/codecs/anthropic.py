"""
Anthropic Messages API codec.
"""

from typing import Any, Dict, List, Optional

from ..core.errors import GatewayDecodeError
from ..models.message import ApiError, ProviderConfig
from ..models.stream import StreamChunk
from .base import WireCodec


class AnthropicCodec(WireCodec):
    """
    Request/response shapes for POST /v1/messages.

    Stream events look like {"type": "content_block_delta",
    "delta": {"type": "text_delta", "text": "..."}}; the turn ends with
    content_block_stop / message_stop.
    """

    vendor = "anthropic"
    end_event_types = frozenset({"content_block_stop", "message_stop"})

    def build_payload(
        self,
        messages: List[Dict[str, str]],
        config: ProviderConfig,
        streaming: bool,
    ) -> Dict[str, Any]:
        data = {
            "model": config.model,
            "messages": messages,
            "max_tokens": config.max_tokens,
            "stream": streaming,
        }
        if config.system_prompt:
            data["system"] = config.system_prompt
        return data

    def parse_event(self, event: Dict[str, Any]) -> Optional[StreamChunk]:
        delta = event.get("delta")
        if not isinstance(delta, dict):
            return None
        text = delta.get("text")
        if not isinstance(text, str):
            return None
        return StreamChunk(text=text)

    def extract_text(self, body: Dict[str, Any]) -> str:
        blocks = body.get("content")
        if not isinstance(blocks, list):
            raise GatewayDecodeError("Response has no content blocks", gateway=self.vendor)
        parts = []
        for block in blocks:
            if not isinstance(block, dict) or block.get("type") != "text":
                continue
            text = block.get("text", "")
            if not isinstance(text, str):
                raise GatewayDecodeError("Text block has no text", gateway=self.vendor)
            parts.append(text)
        return "".join(parts)

    def stream_error(self, event: Dict[str, Any]) -> Optional[ApiError]:
        # event: error / data: {"type": "error", "error": {"type": "overloaded_error", ...}}
        if event.get("type") != "error":
            return None
        return self.extract_error(event) or ApiError(message="Stream error")

    def extract_error(self, body: Any) -> Optional[ApiError]:
        # {"type": "error", "error": {"type": "invalid_request_error", "message": "..."}}
        if not isinstance(body, dict):
            return None
        error = body.get("error")
        if not isinstance(error, dict) or "type" not in error:
            return None
        return ApiError(
            category=str(error.get("type")),
            message=str(error.get("message", "")),
        )
