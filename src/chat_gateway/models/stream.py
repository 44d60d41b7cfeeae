"""
Incremental response units.
"""

from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict


class StreamChunk(BaseModel):
    """
    A piece of streamed assistant text.

    A logical stream is zero or more chunks with is_done=False followed by
    exactly one terminal chunk with is_done=True (its text may be empty).
    The orchestrator stamps model/provider so interleaved output from
    several targets stays attributable.
    """
    model_config = ConfigDict(frozen=True)

    text: str = ""
    is_done: bool = False
    model: Optional[str] = None
    provider: Optional[str] = None

    @classmethod
    def done(cls) -> "StreamChunk":
        return cls(text="", is_done=True)


ChunkCallback = Callable[[StreamChunk], None]
