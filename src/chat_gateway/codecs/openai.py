"""
OpenAI Chat Completions codec.

Also used for OpenRouter, which speaks the same wire format.
"""

from typing import Any, Dict, List, Optional

from ..core.errors import GatewayDecodeError
from ..models.message import ApiError, ProviderConfig
from ..models.stream import StreamChunk
from .base import WireCodec


def _content_text(content: Any, vendor: str) -> str:
    if content is None or isinstance(content, str):
        return content or ""
    if not isinstance(content, list):
        raise GatewayDecodeError("Message content is not text", gateway=vendor)
    parts = []
    for part in content:
        if not isinstance(part, dict) or part.get("type") not in ("text", "output_text"):
            continue
        text = part.get("text", "")
        if not isinstance(text, str):
            raise GatewayDecodeError("Content part has no text", gateway=vendor)
        parts.append(text)
    return "".join(parts)


class OpenAICodec(WireCodec):
    """
    Request/response shapes for POST /chat/completions.

    Stream events carry choices[0].delta.content and the stream is closed
    by a literal "data: [DONE]" line.
    """

    vendor = "openai"

    def __init__(self, vendor: str = "openai"):
        self.vendor = vendor

    def build_payload(
        self,
        messages: List[Dict[str, str]],
        config: ProviderConfig,
        streaming: bool,
    ) -> Dict[str, Any]:
        # System prompts travel as system-role messages in the history here.
        return {
            "model": config.model,
            "messages": messages,
            "max_tokens": config.max_tokens,
            "stream": streaming,
        }

    def parse_event(self, event: Dict[str, Any]) -> Optional[StreamChunk]:
        choices = event.get("choices")
        if not isinstance(choices, list) or not choices:
            return None
        choice = choices[0]
        if not isinstance(choice, dict):
            return None
        delta = choice.get("delta") or {}
        text = delta.get("content") if isinstance(delta, dict) else None
        if not isinstance(text, str):
            return None
        return StreamChunk(text=text)

    def extract_text(self, body: Dict[str, Any]) -> str:
        choices = body.get("choices")
        if not isinstance(choices, list):
            raise GatewayDecodeError("Response has no choices", gateway=self.vendor)
        if not choices:
            return ""
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if not isinstance(message, dict):
            raise GatewayDecodeError("Choice has no message", gateway=self.vendor)
        return _content_text(message.get("content"), self.vendor)

    def stream_error(self, event: Dict[str, Any]) -> Optional[ApiError]:
        # OpenRouter reports upstream failures mid-stream as {"error": {...}}
        if "error" not in event:
            return None
        return self.extract_error(event) or ApiError(message="Stream error")

    def extract_error(self, body: Any) -> Optional[ApiError]:
        # {"error": {"message": "...", "type": "invalid_request_error", "code": ...}}
        if not isinstance(body, dict):
            return None
        error = body.get("error")
        if not isinstance(error, dict) or "message" not in error:
            return None
        category = error.get("type") or error.get("code") or "Unknown"
        return ApiError(category=str(category), message=str(error.get("message", "")))
