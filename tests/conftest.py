"""Shared test fixtures and protocol-conforming fakes."""

from __future__ import annotations

import asyncio
import json
from collections import deque
from pathlib import Path

import pytest

from llmhub.l1_entities.chat_message import Message, Suggestion
from llmhub.l1_entities.config import AppConfig
from llmhub.l2_use_cases.generate_use_case import RetryingRequester
from llmhub.l2_use_cases.ports.llm_client import GenerationRequest
from llmhub.l2_use_cases.ports.presenter import Notice
from llmhub.l2_use_cases.utils.prompt_builder import SUGGESTION_SYSTEM_PROMPT
from llmhub.l3_interface_adapters.controllers.chat_controller import ChatController
from llmhub.l3_interface_adapters.gateways.in_memory_suggestion_cache import InMemorySuggestionCache
from llmhub.l4_frameworks_and_drivers.config import build_app_config


def ndjson(*fragments: str, done: bool = True) -> list[bytes]:
    """Encode fragments as Ollama-style NDJSON body chunks, one record per chunk."""
    chunks = [(json.dumps({'response': f, 'done': False}) + '\n').encode() for f in fragments]
    if done:
        chunks.append((json.dumps({'response': '', 'done': True}) + '\n').encode())
    return chunks


# --- Protocol-conforming Fakes ---


class FakeGenerationClient:
    """Scripted generation client.

    A script is an exception (raised on connect) or a list whose items are
    byte chunks to yield, exceptions to raise mid-stream, or asyncio.Events to
    wait on. Main and suggestion requests have separate script queues; the
    last script of a queue is reused once the queue runs dry.
    """

    def __init__(self, main: list | None = None, suggestions: list | None = None) -> None:
        self._scripts = {
            'main': deque(main if main is not None else [ndjson('Fake', ' reply')]),
            'suggestions': deque(suggestions if suggestions is not None else [ndjson('1. Alt A\n2. Alt B')]),
        }
        self.requests: list[GenerationRequest] = []
        self._connectivity = (True, '')
        self._missing_models: list[str] = []

    def calls(self, route: str) -> list[GenerationRequest]:
        return [r for r in self.requests if _route(r) == route]

    async def stream_generate(self, request: GenerationRequest):
        self.requests.append(request)
        queue = self._scripts[_route(request)]
        script = queue.popleft() if len(queue) > 1 else queue[0]
        if isinstance(script, BaseException):
            raise script
        for item in script:
            if isinstance(item, BaseException):
                raise item
            if isinstance(item, asyncio.Event):
                await item.wait()
                continue
            await asyncio.sleep(0)
            yield item

    def check_connectivity(self) -> tuple[bool, str]:
        return self._connectivity

    def check_models(self, models: list[str]) -> list[str]:
        return [m for m in models if m in self._missing_models]

    def set_connectivity(self, ok: bool, msg: str = '') -> None:
        self._connectivity = (ok, msg)

    def set_missing_models(self, models: list[str]) -> None:
        self._missing_models = list(models)


def _route(request: GenerationRequest) -> str:
    return 'suggestions' if request.system == SUGGESTION_SYSTEM_PROMPT else 'main'


class FakePresenter:
    """Records every change the controller reports."""

    def __init__(self) -> None:
        self.updates: list[tuple[str, str]] = []
        self.suggestion_lists: list[list[str]] = []
        self.notices: list[Notice] = []
        self.states: list[str] = []

    def message_updated(self, message: Message) -> None:
        self.updates.append((message.id, message.content))

    def suggestions_updated(self, suggestions: list[Suggestion]) -> None:
        self.suggestion_lists.append([s.prompt for s in suggestions])

    def notify(self, notice: Notice) -> None:
        self.notices.append(notice)

    def state_changed(self, state: str) -> None:
        self.states.append(state)


# --- Standard Fixtures ---


@pytest.fixture
def fast_config() -> AppConfig:
    """Default config with retry backoff and delivery throttling disabled."""
    return build_app_config({'retry': {'base_interval': 0}, 'delivery': {'delay': 0}})


@pytest.fixture
def fake_client() -> FakeGenerationClient:
    return FakeGenerationClient()


@pytest.fixture
def fake_presenter() -> FakePresenter:
    return FakePresenter()


@pytest.fixture
def make_controller(fast_config: AppConfig, fake_presenter: FakePresenter):
    def _make(
        client: FakeGenerationClient,
        config: AppConfig | None = None,
        cache: InMemorySuggestionCache | None = None,
    ) -> ChatController:
        cfg = config or fast_config
        requester = RetryingRequester(client, model='llama-3:8b', base_interval=cfg.retry.base_interval)
        return ChatController(
            config=cfg,
            requester=requester,
            cache=cache if cache is not None else InMemorySuggestionCache(),
            presenter=fake_presenter,
        )

    return _make


@pytest.fixture
def sample_config_yaml(tmp_path: Path) -> Path:
    content = """\
model:
  name: "Mistral"
  version: "7b"
chat:
  temperature: 0.5
  max_tokens: 512
  system_prompt: "Be brief."
suggestions:
  enabled: false
  max_suggestions: 4
  temperature: 0.2
  max_tokens: 128
retry:
  max_retries: 1
  base_interval: 0.5
delivery:
  delay: 0.01
mode: "expert"
ollama:
  host: "http://gpu-box:11434"
"""
    p = tmp_path / 'config.yaml'
    p.write_text(content, encoding='utf-8')
    return p
