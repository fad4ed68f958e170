"""Tests for Ollama client gateway — httpx.MockTransport and ollama mocks live here (L3 boundary)."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest

from llmhub.l1_entities.errors import GenerationError
from llmhub.l2_use_cases.ports.llm_client import GenerationRequest
from llmhub.l3_interface_adapters.gateways.ollama_llm_client import OllamaLLMClient

REQUEST = GenerationRequest(model='llama-3:8b', prompt='hi', system='be nice', temperature=0.7, max_tokens=2048)


async def _drain(client: OllamaLLMClient) -> list[bytes]:
    return [chunk async for chunk in client.stream_generate(REQUEST)]


class TestStreamGenerate:
    @pytest.mark.asyncio
    async def test_posts_expected_body(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b'{"response":"ok","done":true}\n')

        client = OllamaLLMClient(host='http://ollama:11434/', transport=httpx.MockTransport(handler))
        chunks = await _drain(client)

        assert b''.join(chunks) == b'{"response":"ok","done":true}\n'
        req = seen[0]
        assert req.method == 'POST'
        assert str(req.url) == 'http://ollama:11434/api/generate'
        assert json.loads(req.content) == {
            'model': 'llama-3:8b',
            'prompt': 'hi',
            'system': 'be nice',
            'temperature': 0.7,
            'max_tokens': 2048,
            'stream': True,
        }

    @pytest.mark.asyncio
    async def test_non_success_status_raises(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500, content=b'boom'))
        client = OllamaLLMClient(transport=transport)

        with pytest.raises(GenerationError, match='status: 500'):
            await _drain(client)

    @pytest.mark.asyncio
    async def test_empty_body_raises(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b''))
        client = OllamaLLMClient(transport=transport)

        with pytest.raises(GenerationError, match='no body'):
            await _drain(client)

    @pytest.mark.asyncio
    async def test_transport_error_wrapped(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError('connection refused', request=request)

        client = OllamaLLMClient(transport=httpx.MockTransport(handler))

        with pytest.raises(GenerationError, match='ConnectError'):
            await _drain(client)

    @pytest.mark.asyncio
    async def test_invalid_host_wrapped(self):
        client = OllamaLLMClient(host='http://[::1')

        with pytest.raises(GenerationError, match='InvalidURL'):
            await _drain(client)

    @pytest.mark.asyncio
    async def test_read_error_mid_stream_wrapped(self):
        async def body():
            yield b'{"response":"a","done":false}\n'
            raise httpx.ReadError('connection reset')

        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=body()))
        client = OllamaLLMClient(transport=transport)
        chunks: list[bytes] = []

        with pytest.raises(GenerationError, match='ReadError'):
            async for chunk in client.stream_generate(REQUEST):
                chunks.append(chunk)
        assert chunks == [b'{"response":"a","done":false}\n']


class TestPreflight:
    @patch('llmhub.l3_interface_adapters.gateways.ollama_llm_client.ollama_sync.Client')
    def test_check_connectivity_success(self, mock_client_cls):
        mock_client = MagicMock()
        mock_client_cls.return_value = mock_client
        mock_client.list.return_value = MagicMock()

        ok, err = OllamaLLMClient().check_connectivity()
        assert ok is True
        assert err == ''

    @patch('llmhub.l3_interface_adapters.gateways.ollama_llm_client.ollama_sync.Client')
    def test_check_connectivity_failure(self, mock_client_cls):
        mock_client = MagicMock()
        mock_client_cls.return_value = mock_client
        mock_client.list.side_effect = ConnectionError('nope')

        ok, err = OllamaLLMClient().check_connectivity()
        assert ok is False
        assert 'Cannot connect' in err

    @patch('llmhub.l3_interface_adapters.gateways.ollama_llm_client.ollama_sync.Client')
    def test_check_models_some_missing(self, mock_client_cls):
        import ollama as ollama_lib

        mock_client = MagicMock()
        mock_client_cls.return_value = mock_client

        def _show(model):
            if model == 'missing-model':
                raise ollama_lib.ResponseError('model not found')
            return MagicMock()

        mock_client.show.side_effect = _show

        assert OllamaLLMClient().check_models(['llama-3:8b', 'missing-model']) == ['missing-model']

    @patch('llmhub.l3_interface_adapters.gateways.ollama_llm_client.ollama_sync.Client')
    def test_check_models_connectivity_failure_returns_empty(self, mock_client_cls):
        mock_client = MagicMock()
        mock_client_cls.return_value = mock_client
        mock_client.show.side_effect = ConnectionError('cannot connect')

        assert OllamaLLMClient().check_models(['llama-3:8b']) == []
