"""Location ingest endpoints.

The device shell pushes each new position fix here. This is a thin FastAPI
adapter: it parses the JSON body and publishes into the client's fix channel.
"""

from __future__ import annotations

import json
import time

from fastapi import APIRouter, Request, Response

from ripples.core.models import PositionFix

router = APIRouter(prefix="/api/v1")


def _error(status: int, message: str) -> Response:
    return Response(
        content=json.dumps({"accepted": False, "error": message}),
        status_code=status,
        media_type="application/json",
    )


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_json_fix(body: dict) -> PositionFix | str:
    """Parse a fix from JSON. Returns an error string if the fix is invalid."""
    lat = body.get("latitude")
    lon = body.get("longitude")
    if not _is_number(lat) or not _is_number(lon):
        return "latitude and longitude are required numbers"
    if not -90.0 <= lat <= 90.0:
        return f"latitude out of range: {lat}"
    if not -180.0 <= lon <= 180.0:
        return f"longitude out of range: {lon}"
    accuracy = body.get("accuracy_m", 0.0)
    if not _is_number(accuracy):
        return "accuracy_m must be a number"
    timestamp = body.get("timestamp", time.time())
    if not _is_number(timestamp):
        return "timestamp must be a number"
    return PositionFix(latitude=float(lat), longitude=float(lon),
                       timestamp=float(timestamp), accuracy_m=float(accuracy))


@router.post("/location")
async def receive_location(request: Request) -> Response:
    """Receive a position fix from the device's geolocation service."""
    from ripples.main import get_client

    client = get_client(request)
    try:
        body = json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error(400, "invalid JSON")
    if not isinstance(body, dict):
        return _error(400, "body must be a JSON object")

    fix = _parse_json_fix(body)
    if isinstance(fix, str):
        return _error(422, fix)

    if not client.channel.publish(fix):
        return _error(503, "location updates stopped")

    return Response(
        content=json.dumps({"accepted": True, "error": ""}),
        status_code=202,
        media_type="application/json",
    )


@router.put("/party-mode")
async def set_party_mode(request: Request) -> Response:
    """Toggle party mode. Sent with every following report."""
    from ripples.main import get_client

    client = get_client(request)
    try:
        body = json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error(400, "invalid JSON")
    enabled = body.get("enabled") if isinstance(body, dict) else None
    if not isinstance(enabled, bool):
        return _error(422, "enabled must be a boolean")

    client.party_mode = enabled
    return Response(
        content=json.dumps({"party_mode": client.party_mode}),
        status_code=200,
        media_type="application/json",
    )
