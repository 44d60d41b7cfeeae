"""
Fixtures for gateway tests.
"""
from typing import List

import pytest

from chat_gateway.core.config import AppConfig, ProviderSettings
from chat_gateway.core.history import ConversationState
from chat_gateway.models.message import Message, ProviderConfig

from stubs import TEST_KEY, ChunkRecorder


@pytest.fixture
def recorder() -> ChunkRecorder:
    return ChunkRecorder()


@pytest.fixture
def history() -> List[Message]:
    return [Message.user("hi")]


@pytest.fixture
def anthropic_config() -> ProviderConfig:
    return ProviderConfig(api_key=TEST_KEY, model="claude-3-haiku-20240307", max_tokens=256)


@pytest.fixture
def openai_config() -> ProviderConfig:
    return ProviderConfig(api_key=TEST_KEY, model="gpt-4", max_tokens=256)


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        active_provider="anthropic",
        providers={
            "anthropic": ProviderSettings(model="claude-3-haiku-20240307", api_key=TEST_KEY),
            "openai": ProviderSettings(model="gpt-4", api_key=TEST_KEY),
            "openrouter": ProviderSettings(model="anthropic/claude-3-opus", api_key=""),
        },
    )


@pytest.fixture
def conversation() -> ConversationState:
    return ConversationState()
