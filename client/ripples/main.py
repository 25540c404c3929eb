"""Ripples client — main entry point.

This is the only file that knows about concrete implementations.
It wires the client runtime to the local API used by the presentation shell.

Run with: uvicorn ripples.main:app
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request

from ripples.api.location import router as location_router
from ripples.api.monitoring import router as monitoring_router
from ripples.api.state import router as state_router
from ripples.client import RippleClient
from ripples.config import AppConfig, load_config

log = structlog.get_logger()


def setup_logging(config: AppConfig) -> None:
    """Configure structlog based on the logging config."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if config.logging.format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(config.logging.level.upper()),
        ),
    )


def get_client(request: Request) -> RippleClient:
    client = getattr(request.app.state, "client", None)
    assert client is not None, "Client not initialized"
    return client


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Client startup and shutdown."""
    config = load_config()
    setup_logging(config)

    log.info("client_starting",
             service=config.service.base_url,
             party_mode=config.reporting.party_mode)

    client = RippleClient(config)
    app.state.client = client
    await client.start()

    yield

    await client.stop()
    app.state.client = None


app = FastAPI(
    title="Ripples",
    description="Proximity-sharing location client",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(location_router)
app.include_router(state_router)
app.include_router(monitoring_router)
