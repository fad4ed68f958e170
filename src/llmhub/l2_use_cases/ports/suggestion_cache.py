"""Port: suggestion cache."""

from __future__ import annotations

from typing import Protocol

from llmhub.l1_entities.chat_message import Suggestion


class SuggestionCache(Protocol):
    """Memoizes suggestion lists by prompt text (implementations normalize keys)."""

    def get(self, key: str) -> list[Suggestion] | None: ...

    def set(self, key: str, suggestions: list[Suggestion]) -> None: ...
