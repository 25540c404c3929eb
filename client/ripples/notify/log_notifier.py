"""Notifier that only logs. Used when no device alert hook is wired in."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from ripples.core.models import ServerResponse

log = structlog.get_logger()


class LogNotifier:
    def nearby_ripple(self, response: ServerResponse) -> None:
        log.info("nearby_ripple", message=response.message,
                 ripples=len(response.nearby_ripples))
