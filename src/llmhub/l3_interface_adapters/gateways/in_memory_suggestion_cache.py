"""Gateway: process-local suggestion cache — implements SuggestionCache port."""

from __future__ import annotations

from collections import OrderedDict

from llmhub.l1_entities.chat_message import Suggestion


def normalize_prompt(text: str) -> str:
    """Cache key for prompt text: trimmed and case-folded."""
    return text.strip().casefold()


class InMemorySuggestionCache:
    """Maps normalized prompt text to suggestion lists.

    Unbounded unless *max_entries* is given, in which case the least
    recently used entry is evicted first.
    """

    def __init__(self, max_entries: int | None = None) -> None:
        self._max_entries = max_entries
        self._entries: OrderedDict[str, list[Suggestion]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> list[Suggestion] | None:
        norm = normalize_prompt(key)
        entry = self._entries.get(norm)
        if entry is None:
            return None
        self._entries.move_to_end(norm)
        return list(entry)

    def set(self, key: str, suggestions: list[Suggestion]) -> None:
        norm = normalize_prompt(key)
        self._entries[norm] = list(suggestions)
        self._entries.move_to_end(norm)
        if self._max_entries is not None:
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)
