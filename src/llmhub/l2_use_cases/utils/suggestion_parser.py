"""Parse numbered-list model output into suggestions."""

from __future__ import annotations

import re

from llmhub.l1_entities.chat_message import Suggestion

_NUMBERED_LINE = re.compile(r'^\s*\d+\.\s*(.+?)\s*$')


def parse_suggestions(text: str, limit: int) -> list[Suggestion]:
    """Keep lines like ``1. Try X`` (marker stripped), at most *limit* of them.

    Output with no numbered lines yields an empty list.
    """
    result: list[Suggestion] = []
    for line in text.splitlines():
        if len(result) >= limit:
            break
        match = _NUMBERED_LINE.match(line)
        if match:
            result.append(Suggestion(prompt=match.group(1)))
    return result
