"""Tests for ripple service response decoding."""

from __future__ import annotations

import json

import pytest

from ripples.core.codec import decode_response, parse_response
from ripples.core.errors import ResponseDecodeError


def _ripple(ripple_id="a", members=("u1", "u2"), coords=(-73.0, 40.0)):
    return {
        "_id": ripple_id,
        "members": list(members),
        "origin": {"type": "Point", "coordinates": list(coords)},
    }


def test_full_response():
    resp = parse_response({
        "message": "Joined ripple",
        "nearbyRipples": [_ripple("a"), _ripple("b", members=["u3"], coords=[2.35, 48.85])],
        "ripple_id": "a",
    })
    assert resp.message == "Joined ripple"
    assert resp.joined_ripple_id == "a"
    assert [r.id for r in resp.nearby_ripples] == ["a", "b"]
    first = resp.nearby_ripples[0]
    assert first.origin_longitude == -73.0
    assert first.origin_latitude == 40.0
    assert first.member_count == 2
    assert resp.nearby_ripples[1].member_count == 1


def test_optional_fields_absent():
    resp = parse_response({"nearbyRipples": []})
    assert resp.nearby_ripples == ()
    assert resp.message is None
    assert resp.joined_ripple_id is None


def test_null_optional_fields():
    resp = parse_response({"nearbyRipples": [], "message": None, "ripple_id": None})
    assert resp.message is None
    assert resp.joined_ripple_id is None


def test_empty_members_list_counts_zero():
    resp = parse_response({"nearbyRipples": [_ripple(members=[])]})
    assert resp.nearby_ripples[0].member_count == 0


def test_decode_bytes():
    content = json.dumps({"nearbyRipples": [_ripple()], "ripple_id": "a"}).encode()
    resp = decode_response(content)
    assert resp.joined_ripple_id == "a"


@pytest.mark.parametrize("body", [
    [],
    "nope",
    {},
    {"nearbyRipples": {"a": 1}},
    {"nearbyRipples": ["a"]},
    {"nearbyRipples": [{"members": [], "origin": {"type": "Point", "coordinates": [0, 0]}}]},
    {"nearbyRipples": [{"_id": "", "members": [], "origin": {"type": "Point", "coordinates": [0, 0]}}]},
    {"nearbyRipples": [{"_id": "a", "origin": {"type": "Point", "coordinates": [0, 0]}}]},
    {"nearbyRipples": [{"_id": "a", "members": 3, "origin": {"type": "Point", "coordinates": [0, 0]}}]},
    {"nearbyRipples": [{"_id": "a", "members": []}]},
    {"nearbyRipples": [{"_id": "a", "members": [], "origin": {"type": "Point", "coordinates": [0]}}]},
    {"nearbyRipples": [{"_id": "a", "members": [], "origin": {"type": "Point", "coordinates": [0, 0, 0]}}]},
    {"nearbyRipples": [{"_id": "a", "members": [], "origin": {"type": "Point", "coordinates": ["0", 0]}}]},
    {"nearbyRipples": [{"_id": "a", "members": [], "origin": {"type": "Point", "coordinates": [True, 0]}}]},
    {"nearbyRipples": [{"_id": "a", "members": [1, None], "origin": {"type": "Point", "coordinates": [0, 0]}}]},
    {"nearbyRipples": [{"_id": "a", "members": ["u1", {"id": "u2"}], "origin": {"type": "Point", "coordinates": [0, 0]}}]},
    {"nearbyRipples": [{"_id": "a", "members": [], "origin": {"coordinates": [0, 0]}}]},
    {"nearbyRipples": [{"_id": "a", "members": [], "origin": {"type": "Polygon", "coordinates": [0, 0]}}]},
    {"nearbyRipples": [], "message": 5},
    {"nearbyRipples": [], "ripple_id": ["a"]},
    {"nearbyRipples": [], "schemaVersion": 2},
])
def test_malformed_bodies_fail_closed(body):
    with pytest.raises(ResponseDecodeError):
        parse_response(body)


def test_latitude_first_coordinates_rejected_when_out_of_range():
    """[lat, lon] sent by mistake is caught once the longitude exceeds +-90."""
    with pytest.raises(ResponseDecodeError, match="latitude out of range"):
        parse_response({"nearbyRipples": [_ripple(coords=[40.7, -122.4])]})


def test_longitude_out_of_range():
    with pytest.raises(ResponseDecodeError, match="longitude out of range"):
        parse_response({"nearbyRipples": [_ripple(coords=[190.0, 10.0])]})


def test_invalid_json_bytes():
    with pytest.raises(ResponseDecodeError, match="invalid JSON"):
        decode_response(b"<html>502 Bad Gateway</html>")


def test_one_bad_ripple_rejects_whole_response():
    with pytest.raises(ResponseDecodeError):
        parse_response({"nearbyRipples": [_ripple("a"), {"_id": "b"}]})
