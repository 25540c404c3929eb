"""Latest-fix channel between the geolocation source and the scheduler.

Single producer, single consumer. The channel holds at most one undelivered
fix: publishing while the consumer is busy overwrites it. Missed fixes are
never buffered.
"""

from __future__ import annotations

import asyncio
from typing import AsyncIterator

import structlog

from ripples.core.models import PositionFix

log = structlog.get_logger()


class LatestFixChannel:
    def __init__(self) -> None:
        self._pending: PositionFix | None = None
        self._latest: PositionFix | None = None
        self._event = asyncio.Event()
        self._closed = False

    @property
    def latest(self) -> PositionFix | None:
        """Most recently published fix, delivered or not."""
        return self._latest

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, fix: PositionFix) -> bool:
        """Offer a fix. Returns False if the channel is closed."""
        if self._closed:
            return False
        self._pending = fix
        self._latest = fix
        self._event.set()
        return True

    def close(self) -> None:
        """Stop delivery. Any undelivered fix is discarded."""
        self._closed = True
        self._pending = None
        self._event.set()

    async def subscribe(self) -> AsyncIterator[PositionFix]:
        while True:
            await self._event.wait()
            self._event.clear()
            if self._closed:
                return
            fix, self._pending = self._pending, None
            if fix is not None:
                yield fix
