"""Health check and monitoring endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(prefix="/api/v1")


@router.get("/health")
async def health(request: Request) -> dict:
    """Basic health check."""
    from ripples.main import get_client

    client = get_client(request)
    snapshot = client.stats.snapshot()
    last_fix = client.channel.latest
    return {
        "status": "ok",
        "version": "0.1.0",
        "uptime_seconds": snapshot["uptime_seconds"],
        "running": client.running,
        "report_in_flight": client.scheduler.busy,
        "has_fix": last_fix is not None,
        "last_error": client.store.snapshot().last_error,
    }


@router.get("/stats")
async def stats(request: Request) -> dict:
    """Report loop counters.

    ``fixes_dropped_busy`` counts fixes that arrived while a report was
    still in flight and therefore did not trigger one.
    """
    from ripples.main import get_client

    return get_client(request).stats.snapshot()
