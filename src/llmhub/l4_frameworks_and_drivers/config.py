"""Infrastructure provider configs and app defaults — lives in L4, not domain."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from llmhub.l1_entities.config import AppConfig
from llmhub.l3_interface_adapters.gateways.yaml_config_loader import merge_layers

APP_CONFIG_DEFAULTS: dict = {
    'model': {
        'name': 'Llama-3',
        'version': '',
    },
    'chat': {
        'temperature': 0.7,
        'max_tokens': 2048,
        'system_prompt': 'You are a helpful assistant.',
    },
    'suggestions': {
        'enabled': True,
        'max_suggestions': 3,
        'temperature': 0.3,
        'max_tokens': 256,
        'cache_max_entries': None,
    },
    'retry': {
        'max_retries': 2,
        'base_interval': 1.0,
    },
    'delivery': {
        'delay': 0.05,
    },
    'mode': 'none',
}


def build_app_config(raw: dict) -> AppConfig:
    """Merge *raw* user overrides on top of defaults, then validate."""
    return AppConfig.model_validate(merge_layers(APP_CONFIG_DEFAULTS, raw))


class OllamaEndpoint(BaseModel):
    host: str = 'http://localhost:11434'

    @field_validator('host')
    @classmethod
    def _http_url(cls, value: str) -> str:
        if not value.startswith(('http://', 'https://')):
            raise ValueError(f'Ollama host must be an http(s) URL, got {value!r}')
        return value.rstrip('/')


class InfraConfig(BaseModel):
    """Groups all provider-specific settings outside the domain layer."""

    ollama: OllamaEndpoint = Field(default_factory=OllamaEndpoint)
