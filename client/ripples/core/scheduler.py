"""Report scheduler — turns position fixes into location reports.

This is the core business logic. It depends on the ReportTransport and
Notifier protocols, not concrete implementations.

At most one report is in flight. A fix that arrives while a report is
outstanding is dropped, not queued; the next fix after completion starts
the next report. Because calls never overlap, responses are applied in the
order their reports were issued. Allowing overlap would require tagging
each report with a sequence number and discarding stale responses.
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable, TYPE_CHECKING

import structlog

from ripples.core.errors import ReportFailed, ResponseDecodeError
from ripples.core.models import LocationReport

if TYPE_CHECKING:
    from ripples.core.models import PositionFix, ServerResponse
    from ripples.core.state import RippleStateStore
    from ripples.core.stats import ClientStats
    from ripples.location.channel import LatestFixChannel
    from ripples.notify.base import Notifier
    from ripples.transport.base import ReportTransport

log = structlog.get_logger()


class ReportScheduler:
    """Single-flight location reporter and sole writer of the ripple state."""

    def __init__(
        self,
        transport: ReportTransport,
        store: RippleStateStore,
        notifier: Notifier,
        stats: ClientStats,
        user_id: str,
        party_mode: Callable[[], bool] = lambda: False,
    ) -> None:
        self._transport = transport
        self._store = store
        self._notifier = notifier
        self._stats = stats
        self._user_id = user_id
        self._party_mode = party_mode
        self._in_flight: asyncio.Task | None = None

    @property
    def busy(self) -> bool:
        return self._in_flight is not None

    def submit(self, fix: PositionFix) -> bool:
        """Start a report for ``fix`` unless one is already in flight.

        Never blocks. Returns True if a report was started.
        """
        if self._in_flight is not None:
            self._stats.record_fix(dropped=True)
            log.debug("fix_dropped_busy", lat=round(fix.latitude, 5),
                      lon=round(fix.longitude, 5))
            return False

        report = LocationReport.from_fix(fix, self._user_id, self._party_mode())
        self._stats.record_fix(dropped=False)
        self._in_flight = asyncio.create_task(self._round_trip(report))
        return True

    async def run(self, channel: LatestFixChannel) -> None:
        """Feed every delivered fix to submit(). Runs as a background task."""
        log.info("scheduler_started", user=self._user_id[:8])
        async for fix in channel.subscribe():
            self.submit(fix)
        log.info("scheduler_stopped")

    async def wait_idle(self) -> None:
        """Wait for the outstanding report, if any, without cancelling it."""
        task = self._in_flight
        if task is not None:
            await asyncio.shield(task)

    async def _round_trip(self, report: LocationReport) -> None:
        start = time.monotonic()
        try:
            try:
                response = await self._transport.send(report)
            except ReportFailed as e:
                self._fail(start, str(e) or type(e).__name__,
                           decode_error=isinstance(e, ResponseDecodeError))
                log.warning("report_failed", user=report.user_id[:8],
                            kind=type(e).__name__, error=str(e))
                return
            except Exception as e:
                self._fail(start, f"unexpected error: {type(e).__name__}")
                log.error("report_crashed", user=report.user_id[:8], exc_info=True)
                return
            self._apply(response, start)
        finally:
            self._in_flight = None

    def _fail(self, start: float, reason: str, *, decode_error: bool = False) -> None:
        # Stale ripples are not trusted once a round trip fails.
        self._store.replace((), error=f"Location report failed: {reason}")
        self._stats.record_failure((time.monotonic() - start) * 1000,
                                   decode_error=decode_error)

    def _apply(self, response: ServerResponse, start: float) -> None:
        self._store.apply_success(response.nearby_ripples, response.joined_ripple_id)
        joined = response.joined_ripple_id is not None

        nearby = response.signals_nearby
        if nearby:
            try:
                self._notifier.nearby_ripple(response)
            except Exception:
                log.error("nearby_notification_failed", user=self._user_id[:8],
                          exc_info=True)

        elapsed_ms = (time.monotonic() - start) * 1000
        self._stats.record_success(elapsed_ms, joined=joined, nearby=nearby)
        log.info("report_applied", user=self._user_id[:8],
                 ripples=len(response.nearby_ripples),
                 joined=response.joined_ripple_id, nearby=nearby,
                 elapsed_ms=round(elapsed_ms, 1))
