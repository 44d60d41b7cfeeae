"""
Wire-format builders and recorders used across gateway tests.

All HTTP goes through httpx.MockTransport; nothing leaves the process.
"""
import json
from typing import Any, AsyncIterator, Dict, List

import httpx

from chat_gateway.models.stream import StreamChunk

TEST_KEY = "sk-test-secret-key"


def sse_line(event: Dict[str, Any]) -> bytes:
    return f"data: {json.dumps(event)}\n".encode()


def anthropic_delta(text: str) -> bytes:
    return sse_line({"type": "content_block_delta", "delta": {"type": "text_delta", "text": text}})


def anthropic_stream(*texts: str) -> bytes:
    body = b"".join(anthropic_delta(t) for t in texts)
    return body + sse_line({"type": "content_block_stop", "index": 0})


def openai_stream(*texts: str) -> bytes:
    body = b"".join(
        sse_line({"choices": [{"index": 0, "delta": {"content": t}}]}) for t in texts
    )
    return body + b"data: [DONE]\n"


def anthropic_body(*texts: str) -> Dict[str, Any]:
    return {
        "id": "msg_123",
        "type": "message",
        "role": "assistant",
        "content": [{"type": "text", "text": t} for t in texts],
        "stop_reason": "end_turn",
    }


async def byte_stream(parts: List[bytes]) -> AsyncIterator[bytes]:
    for part in parts:
        yield part


def stream_response(*parts: bytes, status_code: int = 200) -> httpx.Response:
    """Response whose body arrives as the given byte buffers."""
    return httpx.Response(
        status_code,
        headers={"content-type": "text/event-stream"},
        content=byte_stream(list(parts)),
    )


def request_json(request: httpx.Request) -> Dict[str, Any]:
    return json.loads(request.content)


class ChunkRecorder:
    """on_chunk callback that keeps every chunk."""

    def __init__(self):
        self.chunks: List[StreamChunk] = []

    def __call__(self, chunk: StreamChunk) -> None:
        self.chunks.append(chunk)

    @property
    def texts(self) -> List[str]:
        return [c.text for c in self.chunks]

    @property
    def done_count(self) -> int:
        return sum(1 for c in self.chunks if c.is_done)
