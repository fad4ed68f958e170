"""Conversation entities — messages and prompt suggestions."""

from __future__ import annotations

import time
import uuid
from typing import Literal

from pydantic import BaseModel, Field

from llmhub.l1_entities.mode import Mode


def _new_id() -> str:
    return uuid.uuid4().hex


def _now_ms() -> int:
    return int(time.time() * 1000)


class Message(BaseModel):
    """A single message in the conversation history.

    Assistant content is replaced in place while its reply streams in.
    """

    id: str = Field(default_factory=_new_id)
    role: Literal['system', 'user', 'assistant']
    content: str = ''
    timestamp: int = Field(default_factory=_now_ms, description='Epoch milliseconds')
    mode: Mode = Mode.NONE


class Suggestion(BaseModel):
    """An alternative phrasing of the user's prompt."""

    id: str = Field(default_factory=_new_id)
    prompt: str

    model_config = {'frozen': True}
