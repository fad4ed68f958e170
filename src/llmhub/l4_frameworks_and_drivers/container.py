"""Dependency container — composition root for wiring all layers together."""

from __future__ import annotations

from llmhub.l1_entities.config import AppConfig
from llmhub.l1_entities.model_catalog import LLMModel, find_model
from llmhub.l2_use_cases.generate_use_case import RetryingRequester
from llmhub.l2_use_cases.ports.llm_client import TextGenerationClient
from llmhub.l2_use_cases.ports.presenter import ChatPresenter
from llmhub.l2_use_cases.ports.suggestion_cache import SuggestionCache
from llmhub.l3_interface_adapters.controllers.chat_controller import ChatController
from llmhub.l3_interface_adapters.gateways.in_memory_suggestion_cache import InMemorySuggestionCache
from llmhub.l3_interface_adapters.gateways.ollama_llm_client import OllamaLLMClient
from llmhub.l4_frameworks_and_drivers.config import InfraConfig


class DependencyContainer:
    """Creates and wires all concrete instances. Easy to override for testing."""

    def __init__(
        self,
        config: AppConfig,
        infra: InfraConfig | None = None,
        presenter: ChatPresenter | None = None,
        llm_client: TextGenerationClient | None = None,
    ) -> None:
        self.config = config

        _infra = infra or InfraConfig()
        self.model: LLMModel = find_model(config.model.name)
        self.model_tag = self.model.model_tag(config.model.version)
        self.llm_client: TextGenerationClient = llm_client or OllamaLLMClient(host=_infra.ollama.host)
        self.suggestion_cache: SuggestionCache = InMemorySuggestionCache(config.suggestions.cache_max_entries)
        self.requester = RetryingRequester(
            self.llm_client,
            model=self.model_tag,
            base_interval=config.retry.base_interval,
        )

        self.controller = ChatController(
            config=config,
            requester=self.requester,
            cache=self.suggestion_cache,
            presenter=presenter,
        )
