"""Throttled, per-message delivery of cumulative text updates."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field

log = logging.getLogger('llmhub.delivery')


@dataclass
class _QueueState:
    pending: deque[str] = field(default_factory=deque)
    drain_task: asyncio.Task[None] | None = None


class DeliveryQueue:
    """Feeds queued values to *deliver* one at a time, *delay* seconds apart.

    Each message id has its own FIFO and at most one drain loop. The loop
    exits once its FIFO is empty and is restarted by the next enqueue.
    """

    def __init__(self, deliver: Callable[[str, str], None], delay: float = 0.05) -> None:
        self._deliver = deliver
        self._delay = delay
        self._queues: dict[str, _QueueState] = {}

    def enqueue(self, message_id: str, value: str) -> None:
        state = self._queues.setdefault(message_id, _QueueState())
        state.pending.append(value)
        if state.drain_task is None or state.drain_task.done():
            state.drain_task = asyncio.get_running_loop().create_task(self._drain(message_id, state))

    def pending(self, message_id: str) -> int:
        state = self._queues.get(message_id)
        return len(state.pending) if state else 0

    def is_draining(self, message_id: str) -> bool:
        state = self._queues.get(message_id)
        return state is not None and state.drain_task is not None and not state.drain_task.done()

    async def join(self, message_id: str) -> None:
        """Wait until every value queued for *message_id* has been delivered."""
        while True:
            state = self._queues.get(message_id)
            if state is None or state.drain_task is None or state.drain_task.done():
                return
            await asyncio.wait({state.drain_task})

    def discard(self, message_id: str) -> None:
        """Drop undelivered values for *message_id* and stop its drain loop."""
        state = self._queues.pop(message_id, None)
        if state is None:
            return
        dropped = len(state.pending)
        state.pending.clear()
        if state.drain_task is not None and not state.drain_task.done():
            state.drain_task.cancel()
        if dropped:
            log.debug('Discarded %d pending update(s) for %s', dropped, message_id)

    async def _drain(self, message_id: str, state: _QueueState) -> None:
        while state.pending:
            value = state.pending.popleft()
            self._deliver(message_id, value)
            await asyncio.sleep(self._delay)
        if self._queues.get(message_id) is state:
            del self._queues[message_id]
