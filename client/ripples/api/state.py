"""Ripple state endpoint read by the map view."""

from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(prefix="/api/v1")


@router.get("/state")
async def get_state(request: Request) -> dict:
    """Current ripple snapshot plus the oscillator scale for the pulse overlay."""
    from ripples.main import get_client

    client = get_client(request)
    result = client.store.snapshot().to_json()
    result["party_mode"] = client.party_mode
    result["oscillator"] = {
        "scale": client.oscillator.scale,
        "direction": client.oscillator.state.direction.value,
    }
    return result
