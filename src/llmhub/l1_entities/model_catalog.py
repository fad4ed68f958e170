"""Catalog of locally runnable models and their published versions."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from llmhub.l1_entities.errors import UnknownModelError


class LLMModel(BaseModel):
    name: str
    versions: list[str] = Field(min_length=1)
    description: str = ''
    default_version: str

    @model_validator(mode='after')
    def _validate_default_version(self) -> LLMModel:
        if self.default_version not in self.versions:
            raise ValueError(f'Default version {self.default_version!r} not in {self.versions}')
        return self

    def resolve_version(self, version: str | None) -> str:
        """Return *version* if published, else the default version."""
        if version and version in self.versions:
            return version
        return self.default_version

    def model_tag(self, version: str | None = None) -> str:
        """Wire-level model string: lower-cased name and version joined by a colon."""
        return f'{self.name.lower()}:{self.resolve_version(version)}'


MODELS: list[LLMModel] = [
    LLMModel(
        name='Deepseek-R1',
        versions=['7b', '13b', '70b'],
        description='General purpose AI model for various tasks',
        default_version='7b',
    ),
    LLMModel(
        name='qwen2.5',
        versions=['7b', '13b', '70b'],
        description='General purpose AI model for various tasks',
        default_version='7b',
    ),
    LLMModel(
        name='Llama-3',
        versions=['8b', '70b'],
        description="Meta's latest open-source LLM",
        default_version='8b',
    ),
    LLMModel(
        name='Mistral',
        versions=['7b', 'mixtral-8x7b'],
        description='High-quality text generation model',
        default_version='7b',
    ),
    LLMModel(
        name='Phi-3',
        versions=['mini', 'small', 'medium'],
        description="Microsoft's lightweight AI model",
        default_version='mini',
    ),
    LLMModel(
        name='Gemma',
        versions=['2b', '7b'],
        description="Google's open lightweight models",
        default_version='2b',
    ),
]


def find_model(name: str, catalog: list[LLMModel] | None = None) -> LLMModel:
    """Case-insensitive lookup by model name. Raises UnknownModelError."""
    for model in catalog if catalog is not None else MODELS:
        if model.name.lower() == name.lower():
            return model
    raise UnknownModelError(f'Unknown model: {name}')
