"""Port: consumer of chat state changes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

from llmhub.l1_entities.chat_message import Message, Suggestion


@dataclass(frozen=True)
class Notice:
    """Transient user-facing notice (toast)."""

    level: Literal['info', 'error']
    text: str


class ChatPresenter(Protocol):
    """Receives every observable change made by the chat controller."""

    def message_updated(self, message: Message) -> None: ...

    def suggestions_updated(self, suggestions: list[Suggestion]) -> None: ...

    def notify(self, notice: Notice) -> None: ...

    def state_changed(self, state: str) -> None: ...
