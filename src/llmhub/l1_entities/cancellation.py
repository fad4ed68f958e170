"""Cooperative cancellation tokens, one pair per chat turn."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field


class CancellationToken:
    """Signals cooperative termination of one request chain."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()

    async def sleep(self, delay: float) -> bool:
        """Sleep up to *delay* seconds. Returns True if cancelled meanwhile."""
        if self.cancelled:
            return True
        if delay <= 0:
            return False
        try:
            await asyncio.wait_for(self._event.wait(), timeout=delay)
        except TimeoutError:
            return False
        return True


@dataclass
class CancellationScope:
    """Independent tokens for the main reply and the suggestion request."""

    main: CancellationToken = field(default_factory=CancellationToken)
    suggestions: CancellationToken = field(default_factory=CancellationToken)

    def cancel_all(self) -> None:
        self.main.cancel()
        self.suggestions.cancel()
