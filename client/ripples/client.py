"""Ripple client runtime.

Owns every component of the report loop and ties their lifetimes together:
the fix channel, the scheduler, the state store, the oscillator and,
optionally, a simulated location source. Readers get the store and the
oscillator through this object; nothing is reachable globally.
"""

from __future__ import annotations

import asyncio
import contextlib

import httpx
import structlog

from ripples.config import AppConfig, parse_center
from ripples.core.identity import resolve_user_id
from ripples.core.oscillator import Oscillator
from ripples.core.scheduler import ReportScheduler
from ripples.core.state import RippleStateStore
from ripples.core.stats import ClientStats
from ripples.location.channel import LatestFixChannel
from ripples.location.simulated import SimulatedLocationSource
from ripples.notify.base import Notifier
from ripples.notify.log_notifier import LogNotifier
from ripples.transport.base import ReportTransport
from ripples.transport.http_transport import HttpReportTransport

log = structlog.get_logger()


class RippleClient:
    def __init__(
        self,
        config: AppConfig,
        transport: ReportTransport | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.config = config
        self.party_mode = config.reporting.party_mode
        self.user_id = resolve_user_id(config.identity.user_id, config.identity.id_file)

        self._http: httpx.AsyncClient | None = None
        if transport is None:
            self._http = httpx.AsyncClient(timeout=config.service.timeout_seconds)
            transport = HttpReportTransport(self._http, config.service.base_url)

        self.stats = ClientStats()
        self.store = RippleStateStore(
            joined_display_seconds=config.reporting.joined_display_seconds,
        )
        self.oscillator = Oscillator(
            lower_bound=config.oscillator.lower_bound,
            upper_bound=config.oscillator.upper_bound,
            step=config.oscillator.step,
            tick_seconds=config.oscillator.tick_seconds,
        )
        self.channel = LatestFixChannel()
        self.scheduler = ReportScheduler(
            transport=transport,
            store=self.store,
            notifier=notifier or LogNotifier(),
            stats=self.stats,
            user_id=self.user_id,
            party_mode=lambda: self.party_mode,
        )
        self._tasks: list[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    async def start(self) -> None:
        if self._tasks:
            return
        source = None
        if self.config.location.source == "simulated":
            source = SimulatedLocationSource(
                self.channel,
                center=parse_center(self.config.location.sim_center),
                interval_seconds=self.config.location.sim_interval_seconds,
            )
        elif self.config.location.source != "push":
            raise ValueError(f"unknown location source {self.config.location.source!r}")

        self._tasks.append(asyncio.create_task(self.scheduler.run(self.channel)))
        self._tasks.append(asyncio.create_task(self.oscillator.run()))
        if source is not None:
            self._tasks.append(asyncio.create_task(source.run()))

        log.info("client_started", user=self.user_id[:8],
                 service=self.config.service.base_url,
                 location_source=self.config.location.source)

    async def stop(self, drain_timeout: float = 5.0) -> None:
        """Stop new fixes, let any outstanding report finish, release resources."""
        self.channel.close()
        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._tasks.clear()

        try:
            await asyncio.wait_for(self.scheduler.wait_idle(), timeout=drain_timeout)
        except asyncio.TimeoutError:
            log.warning("report_still_in_flight_at_shutdown", timeout=drain_timeout)

        self.store.close()
        if self._http is not None:
            await self._http.aclose()
        log.info("client_stopped")
