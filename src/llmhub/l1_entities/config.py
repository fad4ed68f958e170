"""Configuration Pydantic models — pure schema, no infrastructure defaults."""

from __future__ import annotations

from pydantic import BaseModel, Field, PositiveInt

from llmhub.l1_entities.mode import Mode


class ModelSelection(BaseModel):
    name: str
    version: str = ''  # empty = catalog default


class ChatSettings(BaseModel):
    """Sampling parameters and base system prompt, read at the start of each turn."""

    temperature: float = Field(ge=0.0)
    max_tokens: PositiveInt
    system_prompt: str = ''


class SuggestionConfig(BaseModel):
    enabled: bool
    max_suggestions: PositiveInt
    temperature: float = Field(ge=0.0)
    max_tokens: PositiveInt
    cache_max_entries: PositiveInt | None = None  # None = unbounded


class RetryConfig(BaseModel):
    max_retries: int = Field(ge=0)
    base_interval: float = Field(ge=0.0)


class DeliveryConfig(BaseModel):
    delay: float = Field(ge=0.0)


class AppConfig(BaseModel):
    model: ModelSelection
    chat: ChatSettings
    suggestions: SuggestionConfig
    retry: RetryConfig
    delivery: DeliveryConfig
    mode: Mode = Mode.NONE
