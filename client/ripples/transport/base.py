"""Transport interface (port) for location report round trips."""

from __future__ import annotations

from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from ripples.core.models import LocationReport, ServerResponse


class ReportTransport(Protocol):
    """Port: sends one location report and returns the decoded response.

    Implementations raise ReportFailed for every kind of failure and never
    retry.
    """

    async def send(self, report: LocationReport) -> ServerResponse: ...
