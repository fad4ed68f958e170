"""Port: streaming text-generation client."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class GenerationRequest:
    """One outbound generation call."""

    model: str
    prompt: str
    system: str
    temperature: float
    max_tokens: int


class TextGenerationClient(Protocol):
    """Abstract generation client. Zero framework types leak through."""

    def stream_generate(self, request: GenerationRequest) -> AsyncIterator[bytes]:
        """Yield raw NDJSON body chunks. Raises GenerationError on non-success status."""
        ...

    def check_connectivity(self) -> tuple[bool, str]:
        """Pre-flight connectivity check. Returns (ok, error_message)."""
        ...

    def check_models(self, models: list[str]) -> list[str]:
        """Return model names from the list that are not available locally."""
        ...
