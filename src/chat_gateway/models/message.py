"""
Normalized conversation models shared by every provider.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, SecretStr


class Role(str, Enum):
    """Author of a message."""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class Message(BaseModel):
    """
    One conversation message.

    Messages are immutable once created; a conversation orders them by
    insertion.
    """
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: str = Field(default_factory=_new_id)
    role: Role
    content: str
    timestamp: str = Field(default_factory=_now)
    model: Optional[str] = None

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str, model: Optional[str] = None) -> "Message":
        return cls(role=Role.ASSISTANT, content=content, model=model)


class ProviderConfig(BaseModel):
    """
    Per-call configuration for one provider client.

    The API key is a SecretStr so it stays out of reprs and logs.
    """
    model_config = ConfigDict(frozen=True)

    api_key: SecretStr
    model: str
    max_tokens: PositiveInt = 1024
    base_url: Optional[str] = None
    system_prompt: Optional[str] = None

    def with_model(self, model: str) -> "ProviderConfig":
        """Copy of this config targeting a different model."""
        return self.model_copy(update={"model": model})


class ModelSelection(BaseModel):
    """A (provider, model) target chosen for a turn."""
    model_config = ConfigDict(frozen=True)

    model_id: str
    provider_id: str


class ApiError(BaseModel):
    """Vendor error body decoded from a non-2xx response."""
    category: str = "Unknown"
    message: str = ""
