"""Ripple state store — the snapshot read by the presentation layer.

The store holds one frozen RippleState and swaps it as a whole on every
write, so a reader never observes ripples from one report paired with the
error of another. Writes come only from the report scheduler.
"""

from __future__ import annotations

import asyncio
import dataclasses
import threading
import time
from typing import Iterable

import structlog

from ripples.core.models import RippleState, RippleSummary

log = structlog.get_logger()

DEFAULT_JOINED_DISPLAY_SECONDS = 3.0


class RippleStateStore:
    """Owner of the current RippleState.

    ``set_joined`` raises the joined transient and schedules it to clear
    after ``joined_display_seconds``; a new join restarts the delay.
    """

    def __init__(self, joined_display_seconds: float = DEFAULT_JOINED_DISPLAY_SECONDS) -> None:
        self._lock = threading.Lock()
        self._state = RippleState()
        self._joined_display_seconds = joined_display_seconds
        self._clear_handle: asyncio.TimerHandle | None = None

    def snapshot(self) -> RippleState:
        return self._state

    def _swap(self, **changes) -> RippleState:
        with self._lock:
            self._state = dataclasses.replace(
                self._state, updated_at=time.monotonic(), **changes,
            )
            return self._state

    def replace(self, nearby_ripples: Iterable[RippleSummary], error: str | None) -> RippleState:
        """Replace the ripple list and last error together."""
        return self._swap(nearby_ripples=tuple(nearby_ripples), last_error=error)

    def apply_success(
        self,
        nearby_ripples: Iterable[RippleSummary],
        joined_ripple_id: str | None = None,
    ) -> RippleState:
        """Apply a successful report in one swap.

        Ripples, the cleared error and, when ``joined_ripple_id`` is given,
        membership and the joined transient all change together. Must be
        called from within the running event loop when joining.
        """
        if joined_ripple_id is None:
            return self.replace(nearby_ripples, error=None)
        loop = asyncio.get_running_loop()
        state = self._swap(
            nearby_ripples=tuple(nearby_ripples),
            last_error=None,
            current_ripple_id=joined_ripple_id,
            show_joined_transient=True,
        )
        self._schedule_clear(loop)
        log.info("ripple_joined", ripple_id=joined_ripple_id)
        return state

    def set_joined(self, ripple_id: str) -> RippleState:
        """Record membership and raise the joined transient.

        Must be called from within the running event loop.
        """
        loop = asyncio.get_running_loop()
        state = self._swap(current_ripple_id=ripple_id, show_joined_transient=True)
        self._schedule_clear(loop)
        log.info("ripple_joined", ripple_id=ripple_id)
        return state

    def _schedule_clear(self, loop: asyncio.AbstractEventLoop) -> None:
        if self._clear_handle is not None:
            self._clear_handle.cancel()
        self._clear_handle = loop.call_later(self._joined_display_seconds, self._clear_joined)

    def _clear_joined(self) -> None:
        self._clear_handle = None
        self._swap(show_joined_transient=False)
        log.debug("joined_transient_cleared")

    def close(self) -> None:
        """Cancel the pending auto-clear, if any."""
        if self._clear_handle is not None:
            self._clear_handle.cancel()
            self._clear_handle = None
