"""Use case: one logical generation request with bounded retry and cancellation."""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass

from llmhub.l1_entities.cancellation import CancellationToken
from llmhub.l1_entities.config import ChatSettings
from llmhub.l1_entities.errors import GenerationError
from llmhub.l2_use_cases.ports.llm_client import GenerationRequest, TextGenerationClient
from llmhub.l2_use_cases.utils.ndjson_decoder import decode_ndjson_stream

log = logging.getLogger('llmhub.llm')

TRANSPORT_ERRORS = (GenerationError, OSError)


class GenerationOutcome(enum.Enum):
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
    FAILED = 'failed'


@dataclass(frozen=True)
class GenerationResult:
    """Tagged result of a generation request.

    ``text`` is the final value when completed, the last forwarded value when
    cancelled, and whatever was forwarded before the failure when failed.
    """

    outcome: GenerationOutcome
    text: str = ''
    error: str = ''
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.outcome is GenerationOutcome.COMPLETED


@dataclass(frozen=True)
class RequestOptions:
    temperature: float | None = None
    max_tokens: int | None = None
    max_retries: int = 2


class RetryingRequester:
    """Issues a streaming generation call, retrying transport failures with linear backoff.

    Only attempts that failed before forwarding any text are retried. Once a
    value has reached ``on_update`` a retry would restart the text from empty,
    so a later failure ends the request as FAILED carrying the text so far.

    Holds no per-request state; one instance serves both the main and the
    suggestion request of every turn.
    """

    def __init__(self, client: TextGenerationClient, model: str, base_interval: float = 1.0) -> None:
        self._client = client
        self._model = model
        self._base_interval = base_interval

    async def execute(
        self,
        prompt: str,
        system_prompt: str,
        settings: ChatSettings,
        token: CancellationToken,
        on_update: Callable[[str], None] | None = None,
        options: RequestOptions | None = None,
    ) -> GenerationResult:
        opts = options or RequestOptions()
        request = GenerationRequest(
            model=self._model,
            prompt=prompt,
            system=system_prompt,
            temperature=opts.temperature if opts.temperature is not None else settings.temperature,
            max_tokens=opts.max_tokens if opts.max_tokens is not None else settings.max_tokens,
        )
        # Last value forwarded to on_update, if any.
        delivered: list[str] = []

        def forward(value: str) -> None:
            if token.cancelled:
                return
            delivered[:] = [value]
            if on_update is not None:
                on_update(value)

        attempt = 0
        while True:
            if token.cancelled:
                return self._cancelled(delivered, attempt)

            attempt_task = asyncio.ensure_future(self._run_attempt(request, forward))
            cancel_task = asyncio.ensure_future(token.wait())
            try:
                await asyncio.wait({attempt_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
            except asyncio.CancelledError:
                attempt_task.cancel()
                raise
            finally:
                cancel_task.cancel()

            if not attempt_task.done():
                attempt_task.cancel()
                await asyncio.gather(attempt_task, return_exceptions=True)
                return self._cancelled(delivered, attempt + 1)

            try:
                text = attempt_task.result()
            except TRANSPORT_ERRORS as e:
                attempt += 1
                err = f'{type(e).__name__}: {e}'
                if token.cancelled:
                    return self._cancelled(delivered, attempt)
                if delivered:
                    log.error('Generation broke off after partial output: %s', err)
                    return GenerationResult(GenerationOutcome.FAILED, delivered[-1], err, attempt)
                if attempt > opts.max_retries:
                    log.error('Generation failed after %d attempt(s): %s', attempt, err)
                    return GenerationResult(GenerationOutcome.FAILED, error=err, attempts=attempt)
                delay = (attempt - 1) * self._base_interval
                log.warning('Attempt %d failed (%s); retrying in %.1fs', attempt, err, delay)
                if await token.sleep(delay):
                    return self._cancelled(delivered, attempt)
                continue

            attempt += 1
            if token.cancelled:
                return self._cancelled(delivered, attempt)
            log.info('Generation completed: %d chars, %d attempt(s)', len(text), attempt)
            return GenerationResult(GenerationOutcome.COMPLETED, text=text, attempts=attempt)

    async def _run_attempt(self, request: GenerationRequest, forward: Callable[[str], None]) -> str:
        text = ''
        async for value in decode_ndjson_stream(self._client.stream_generate(request)):
            text = value
            forward(value)
        return text

    @staticmethod
    def _cancelled(delivered: list[str], attempts: int) -> GenerationResult:
        log.info('Generation cancelled after %d attempt(s)', attempts)
        text = delivered[-1] if delivered else ''
        return GenerationResult(GenerationOutcome.CANCELLED, text=text, attempts=attempts)
