"""Notifier interface (port) for ripple alerts."""

from __future__ import annotations

from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from ripples.core.models import ServerResponse


class Notifier(Protocol):
    """Port: alerts the user that a ripple is nearby (haptics, sound, ...)."""

    def nearby_ripple(self, response: ServerResponse) -> None: ...
