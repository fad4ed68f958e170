"""ChatController — per-turn orchestration of the main reply and prompt suggestions."""

from __future__ import annotations

import asyncio
import enum
import logging
from functools import partial

from llmhub.l1_entities.cancellation import CancellationScope
from llmhub.l1_entities.chat_message import Message, Suggestion
from llmhub.l1_entities.config import AppConfig, ChatSettings
from llmhub.l1_entities.mode import Mode
from llmhub.l2_use_cases.delivery_queue import DeliveryQueue
from llmhub.l2_use_cases.generate_use_case import (
    GenerationOutcome,
    GenerationResult,
    RequestOptions,
    RetryingRequester,
)
from llmhub.l2_use_cases.ports.presenter import ChatPresenter, Notice
from llmhub.l2_use_cases.ports.suggestion_cache import SuggestionCache
from llmhub.l2_use_cases.utils.prompt_builder import (
    SUGGESTION_SYSTEM_PROMPT,
    build_suggestion_prompt,
    compose_system_prompt,
)
from llmhub.l2_use_cases.utils.suggestion_parser import parse_suggestions

log = logging.getLogger('llmhub.controller')

FAILURE_MESSAGE = 'Sorry, I encountered an error while generating a response. Please try again.'
STOPPED_NOTICE = 'Generation stopped'
ERROR_NOTICE = 'Failed to get a response from the model'


class TurnState(enum.Enum):
    IDLE = 'idle'
    SUBMITTING = 'submitting'
    STREAMING = 'streaming'
    COMPLETING = 'completing'
    CANCELLED = 'cancelled'
    FAILED = 'failed'


class _NullPresenter:
    def message_updated(self, message: Message) -> None:
        pass

    def suggestions_updated(self, suggestions: list[Suggestion]) -> None:
        pass

    def notify(self, notice: Notice) -> None:
        pass

    def state_changed(self, state: str) -> None:
        pass


class ChatController:
    """Central orchestrator between the generation use cases and a presenter.

    Owns the conversation history, the current suggestion list and the
    loading flags. One turn runs at a time; a submission made while a turn
    is active is rejected.
    """

    def __init__(
        self,
        config: AppConfig,
        requester: RetryingRequester,
        cache: SuggestionCache,
        presenter: ChatPresenter | None = None,
    ) -> None:
        self.settings: ChatSettings = config.chat.model_copy()
        self.mode: Mode = config.mode
        self.suggestions_enabled: bool = config.suggestions.enabled

        self._suggestion_config = config.suggestions
        self._max_retries = config.retry.max_retries
        self._requester = requester
        self._cache = cache
        self._presenter: ChatPresenter = presenter or _NullPresenter()
        self._delivery = DeliveryQueue(self._apply_update, delay=config.delivery.delay)

        self.messages: list[Message] = []
        self.suggestions: list[Suggestion] = []
        self.is_generating = False
        self.is_fetching_suggestions = False
        self.state = TurnState.IDLE

        self._by_id: dict[str, Message] = {}
        self._streaming_ids: set[str] = set()
        self._scope: CancellationScope | None = None
        self._active_reply: Message | None = None

    @property
    def scope(self) -> CancellationScope | None:
        """Cancellation tokens of the active turn, None when idle."""
        return self._scope

    def set_mode(self, mode: Mode) -> None:
        self.mode = mode

    def update_settings(self, **changes) -> ChatSettings:
        """Apply user settings changes; takes effect from the next turn."""
        self.settings = ChatSettings.model_validate({**self.settings.model_dump(), **changes})
        return self.settings

    async def submit_turn(self, text: str) -> bool:
        """Run one user turn to completion. Returns False if the input was rejected."""
        prompt = text.strip()
        if not prompt:
            return False
        if self._scope is not None:
            log.warning('Turn already in progress; rejecting submission')
            return False

        scope = CancellationScope()
        self._scope = scope
        self._set_state(TurnState.SUBMITTING)

        mode = self.mode
        reply = Message(role='assistant', content='', mode=mode)
        self._append(Message(role='user', content=prompt, mode=mode))
        self._append(reply)
        self._streaming_ids.add(reply.id)
        self._active_reply = reply
        self.is_generating = True
        self._set_suggestions([])

        try:
            await self._run_turn(prompt, mode, reply, scope)
        except asyncio.CancelledError:
            scope.cancel_all()
            raise
        finally:
            self._streaming_ids.discard(reply.id)
            self._delivery.discard(reply.id)
            self.is_generating = False
            self.is_fetching_suggestions = False
            self._active_reply = None
            self._scope = None
            self._set_state(TurnState.IDLE)
        return True

    def cancel(self) -> None:
        """Stop both requests of the active turn. No-op when idle."""
        if self._scope is None:
            return
        log.info('Cancelling active turn')
        self._scope.cancel_all()
        if self._active_reply is not None:
            self._freeze(self._active_reply)

    def cancel_suggestions(self) -> None:
        """Stop only the suggestion request of the active turn."""
        if self._scope is not None:
            self._scope.suggestions.cancel()

    async def _run_turn(self, prompt: str, mode: Mode, reply: Message, scope: CancellationScope) -> None:
        system_prompt = compose_system_prompt(self.settings.system_prompt, mode)
        self._set_state(TurnState.STREAMING)

        main_task = asyncio.ensure_future(
            self._requester.execute(
                prompt,
                system_prompt,
                self.settings,
                scope.main,
                on_update=partial(self._delivery.enqueue, reply.id),
                options=RequestOptions(max_retries=self._max_retries),
            )
        )
        suggestion_task = self._start_suggestions(prompt, scope)

        try:
            result = await main_task
        except asyncio.CancelledError:
            main_task.cancel()
            if suggestion_task is not None:
                suggestion_task.cancel()
            raise
        except Exception as e:
            log.exception('Main request raised unexpectedly')
            result = GenerationResult(GenerationOutcome.FAILED, error=f'{type(e).__name__}: {e}', attempts=1)

        outcome = result.outcome
        if outcome is GenerationOutcome.COMPLETED:
            await self._delivery.join(reply.id)
            if reply.id in self._streaming_ids:
                self._apply_update(reply.id, result.text)
            else:
                # cancel() froze the reply before its queued updates drained
                outcome = GenerationOutcome.CANCELLED
        elif outcome is GenerationOutcome.CANCELLED:
            self._freeze(reply)
        else:
            self._fail(reply, result)

        if suggestion_task is not None:
            await suggestion_task

        if outcome is GenerationOutcome.COMPLETED:
            self._set_state(TurnState.COMPLETING)
        elif outcome is GenerationOutcome.CANCELLED:
            self._set_state(TurnState.CANCELLED)
            self._presenter.notify(Notice('info', STOPPED_NOTICE))
        else:
            self._set_state(TurnState.FAILED)
            self._presenter.notify(Notice('error', ERROR_NOTICE))

    def _start_suggestions(self, prompt: str, scope: CancellationScope) -> asyncio.Future[None] | None:
        if not self.suggestions_enabled:
            return None
        cached = self._cache.get(prompt)
        if cached is not None:
            log.info('Suggestion cache hit (%d suggestions)', len(cached))
            self._set_suggestions(cached)
            return None
        self.is_fetching_suggestions = True
        return asyncio.ensure_future(self._fetch_suggestions(prompt, scope))

    async def _fetch_suggestions(self, prompt: str, scope: CancellationScope) -> None:
        cfg = self._suggestion_config
        try:
            result = await self._requester.execute(
                build_suggestion_prompt(prompt, cfg.max_suggestions),
                SUGGESTION_SYSTEM_PROMPT,
                self.settings,
                scope.suggestions,
                options=RequestOptions(
                    temperature=cfg.temperature,
                    max_tokens=cfg.max_tokens,
                    max_retries=self._max_retries,
                ),
            )
        except Exception:
            log.exception('Suggestion request raised unexpectedly')
            return
        finally:
            self.is_fetching_suggestions = False

        if result.outcome is GenerationOutcome.COMPLETED:
            suggestions = parse_suggestions(result.text, cfg.max_suggestions)
            self._cache.set(prompt, suggestions)
            self._set_suggestions(suggestions)
        elif result.outcome is GenerationOutcome.FAILED:
            log.warning('Suggestion request failed: %s', result.error)

    def _apply_update(self, message_id: str, value: str) -> None:
        if message_id not in self._streaming_ids:
            return
        message = self._by_id[message_id]
        if len(value) <= len(message.content):
            return
        message.content = value
        self._presenter.message_updated(message)

    def _freeze(self, reply: Message) -> None:
        self._streaming_ids.discard(reply.id)
        self._delivery.discard(reply.id)

    def _fail(self, reply: Message, result: GenerationResult) -> None:
        self._freeze(reply)
        log.error('Turn failed after %d attempt(s): %s', result.attempts, result.error)
        reply.content = FAILURE_MESSAGE
        self._presenter.message_updated(reply)

    def _append(self, message: Message) -> None:
        self.messages.append(message)
        self._by_id[message.id] = message
        self._presenter.message_updated(message)

    def _set_suggestions(self, suggestions: list[Suggestion]) -> None:
        self.suggestions = list(suggestions)
        self._presenter.suggestions_updated(self.suggestions)

    def _set_state(self, state: TurnState) -> None:
        self.state = state
        self._presenter.state_changed(state.value)
