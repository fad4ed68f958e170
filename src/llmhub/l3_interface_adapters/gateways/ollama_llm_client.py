"""Gateway: Ollama generation client — implements TextGenerationClient port."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

import httpx
import ollama as ollama_sync

from llmhub.l1_entities.errors import GenerationError
from llmhub.l2_use_cases.ports.llm_client import GenerationRequest

log = logging.getLogger('llmhub.llm')


class OllamaLLMClient:
    """Streams ``/api/generate`` over httpx; preflight checks go through the ollama library."""

    def __init__(
        self,
        host: str = 'http://localhost:11434',
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._host = host.rstrip('/')
        self._transport = transport

    async def stream_generate(self, request: GenerationRequest) -> AsyncIterator[bytes]:
        body = {
            'model': request.model,
            'prompt': request.prompt,
            'system': request.system,
            'temperature': request.temperature,
            'max_tokens': request.max_tokens,
            'stream': True,
        }
        log.debug('POST %s/api/generate model=%s prompt=%d chars', self._host, request.model, len(request.prompt))
        try:
            async with httpx.AsyncClient(base_url=self._host, timeout=None, transport=self._transport) as client:
                async with client.stream('POST', '/api/generate', json=body) as resp:
                    if not resp.is_success:
                        raise GenerationError(f'HTTP error! status: {resp.status_code}')
                    received = False
                    async for chunk in resp.aiter_bytes():
                        received = True
                        yield chunk
                    if not received:
                        raise GenerationError('Response has no body')
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as e:
            raise GenerationError(f'{type(e).__name__}: {e}') from e

    def check_connectivity(self) -> tuple[bool, str]:
        try:
            client = ollama_sync.Client(host=self._host)
            client.list()
            return True, ''
        except Exception as e:
            return False, f'Cannot connect to Ollama: {e}'

    def check_models(self, models: list[str]) -> list[str]:
        """Return model names that are not pulled locally.

        Falls back to an empty list when the server cannot be reached.
        """
        try:
            client = ollama_sync.Client(host=self._host)
            missing = []
            for model in models:
                try:
                    client.show(model)
                except ollama_sync.ResponseError:
                    missing.append(model)
            return missing
        except Exception:
            return []
