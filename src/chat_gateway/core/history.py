"""
Conversation state owned by one chat session.
"""

import threading
from typing import List, Protocol

from ..models.message import Message


class ConversationStore(Protocol):
    """What the orchestrator needs from conversation storage."""

    def get_history(self) -> List[Message]:
        ...

    def append_message(self, message: Message) -> None:
        ...


class ConversationState:
    """
    Thread-safe, in-memory conversation for one session or window.

    The lock only guards snapshot and append; callers never hold it across
    network I/O.
    """

    def __init__(self, messages: List[Message] = None):
        self._lock = threading.Lock()
        self._messages: List[Message] = list(messages or [])

    def get_history(self) -> List[Message]:
        """Return a snapshot copy of the conversation."""
        with self._lock:
            return list(self._messages)

    def append_message(self, message: Message) -> None:
        with self._lock:
            self._messages.append(message)

    def clear_history(self) -> None:
        with self._lock:
            self._messages.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)
