"""HTTP implementation of ReportTransport, backed by httpx."""

from __future__ import annotations

import json

import httpx
import structlog

from ripples.core.codec import decode_response
from ripples.core.errors import TransportError
from ripples.core.models import LocationReport, ServerResponse

log = structlog.get_logger()


class HttpReportTransport:
    """POSTs a LocationReport as JSON to the ripple service.

    The user id travels in the body and again in a ``userID`` header. Every
    failure surfaces as a ReportFailed subclass.
    """

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        self._client = client
        self._base_url = base_url

    async def send(self, report: LocationReport) -> ServerResponse:
        try:
            resp = await self._client.post(
                self._base_url,
                content=json.dumps(report.to_json()),
                headers={
                    "content-type": "application/json",
                    "userID": report.user_id,
                },
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"request timed out: {e}") from e
        except httpx.RequestError as e:
            raise TransportError(f"request failed: {e}") from e

        if not resp.is_success:
            raise TransportError(
                f"server returned HTTP {resp.status_code}", status_code=resp.status_code,
            )

        response = decode_response(resp.content)
        log.debug("report_response", user=report.user_id[:8],
                  ripples=len(response.nearby_ripples),
                  joined=response.joined_ripple_id)
        return response
