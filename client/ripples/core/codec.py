"""Ripple service response decoding.

The service answers every location report with:

    {
      "message": "...",                      # optional
      "nearbyRipples": [
        {"_id": "...", "members": ["..."],
         "origin": {"type": "Point", "coordinates": [lon, lat]}}
      ],
      "ripple_id": "..."                     # optional
    }

``origin.coordinates`` is GeoJSON order, longitude first. Anything that does
not fit this shape raises ResponseDecodeError; nothing is partially applied.
"""

from __future__ import annotations

import json

from ripples.core.errors import ResponseDecodeError
from ripples.core.models import RippleSummary, ServerResponse

SCHEMA_VERSION = 1


def _require_number(value: object, what: str) -> float:
    # bool is an int subclass; true/false are never coordinates.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ResponseDecodeError(f"{what} is not a number: {value!r}")
    return float(value)


def _optional_str(body: dict, key: str) -> str | None:
    value = body.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ResponseDecodeError(f"{key} must be a string, got {type(value).__name__}")
    return value


def _parse_ripple(data: object, index: int) -> RippleSummary:
    """Parse one entry of nearbyRipples."""
    if not isinstance(data, dict):
        raise ResponseDecodeError(f"nearbyRipples[{index}] is not an object")

    ripple_id = data.get("_id")
    if not isinstance(ripple_id, str) or not ripple_id:
        raise ResponseDecodeError(f"nearbyRipples[{index}]._id missing or empty")

    members = data.get("members")
    if not isinstance(members, list):
        raise ResponseDecodeError(f"nearbyRipples[{index}].members is not a list")
    if not all(isinstance(m, str) for m in members):
        raise ResponseDecodeError(f"nearbyRipples[{index}].members must be user id strings")

    origin = data.get("origin")
    if not isinstance(origin, dict):
        raise ResponseDecodeError(f"nearbyRipples[{index}].origin is not an object")
    if origin.get("type") != "Point":
        raise ResponseDecodeError(
            f"nearbyRipples[{index}].origin.type must be \"Point\", got {origin.get('type')!r}")
    coords = origin.get("coordinates")
    if not isinstance(coords, list) or len(coords) != 2:
        raise ResponseDecodeError(
            f"nearbyRipples[{index}].origin.coordinates must be [lon, lat]")

    lon = _require_number(coords[0], f"nearbyRipples[{index}] longitude")
    lat = _require_number(coords[1], f"nearbyRipples[{index}] latitude")
    if not -180.0 <= lon <= 180.0:
        raise ResponseDecodeError(f"nearbyRipples[{index}] longitude out of range: {lon}")
    if not -90.0 <= lat <= 90.0:
        raise ResponseDecodeError(f"nearbyRipples[{index}] latitude out of range: {lat}")

    return RippleSummary(
        id=ripple_id,
        origin_longitude=lon,
        origin_latitude=lat,
        member_count=len(members),
    )


def parse_response(body: object) -> ServerResponse:
    """Validate a decoded JSON body and convert it to a ServerResponse."""
    if not isinstance(body, dict):
        raise ResponseDecodeError("response body is not a JSON object")

    version = body.get("schemaVersion", SCHEMA_VERSION)
    if version != SCHEMA_VERSION:
        raise ResponseDecodeError(f"unsupported schemaVersion {version!r}")

    raw_ripples = body.get("nearbyRipples")
    if not isinstance(raw_ripples, list):
        raise ResponseDecodeError("nearbyRipples missing or not a list")

    return ServerResponse(
        nearby_ripples=tuple(_parse_ripple(r, i) for i, r in enumerate(raw_ripples)),
        message=_optional_str(body, "message"),
        joined_ripple_id=_optional_str(body, "ripple_id"),
    )


def decode_response(content: bytes) -> ServerResponse:
    """Decode raw response bytes."""
    try:
        body = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ResponseDecodeError(f"invalid JSON: {e}") from e
    return parse_response(body)
