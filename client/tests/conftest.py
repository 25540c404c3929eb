"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import json

import pytest
from fastapi import FastAPI, Request, Response
from httpx import ASGITransport, AsyncClient

import ripples.main as main_module
from ripples.client import RippleClient
from ripples.config import AppConfig
from ripples.core.errors import TransportError
from ripples.core.models import LocationReport, ServerResponse
from ripples.core.state import RippleStateStore
from ripples.core.stats import ClientStats
from ripples.core.scheduler import ReportScheduler
from ripples.transport.http_transport import HttpReportTransport

SERVICE_URL = "http://ripples.test/location"


class FakeRippleService:
    """In-process stand-in for the ripple service.

    Records every request and answers with whatever ``status`` and ``body``
    are currently set, after ``delay`` seconds.
    """

    def __init__(self) -> None:
        self.requests: list[dict] = []
        self.status = 200
        self.body: object = {"nearbyRipples": []}
        self.delay = 0.0
        self.app = FastAPI()
        self.app.add_api_route("/location", self._handle, methods=["POST"])

    async def _handle(self, request: Request) -> Response:
        self.requests.append({
            "headers": dict(request.headers),
            "body": json.loads(await request.body()),
        })
        if self.delay:
            await asyncio.sleep(self.delay)
        content = self.body if isinstance(self.body, (str, bytes)) else json.dumps(self.body)
        return Response(content=content, status_code=self.status,
                        media_type="application/json")


class ScriptedTransport:
    """ReportTransport double returning queued outcomes after a delay."""

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay
        self.outcomes: list[ServerResponse | Exception] = []
        self.calls: list[LocationReport] = []

    async def send(self, report: LocationReport) -> ServerResponse:
        self.calls.append(report)
        if self.delay:
            await asyncio.sleep(self.delay)
        outcome = self.outcomes.pop(0) if self.outcomes else ServerResponse()
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RecordingNotifier:
    def __init__(self) -> None:
        self.nearby: list[ServerResponse] = []

    def nearby_ripple(self, response: ServerResponse) -> None:
        self.nearby.append(response)


@pytest.fixture
def service():
    return FakeRippleService()


@pytest.fixture
async def http_transport(service):
    transport = ASGITransport(app=service.app)
    async with AsyncClient(transport=transport, base_url="http://ripples.test") as c:
        yield HttpReportTransport(c, SERVICE_URL)


@pytest.fixture
def scripted():
    return ScriptedTransport()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def store():
    s = RippleStateStore(joined_display_seconds=0.1)
    yield s
    s.close()


@pytest.fixture
def make_scheduler(store, notifier):
    def _make(transport, party_mode=lambda: False, user_id="user-0001") -> ReportScheduler:
        return ReportScheduler(
            transport=transport,
            store=store,
            notifier=notifier,
            stats=ClientStats(),
            user_id=user_id,
            party_mode=party_mode,
        )
    return _make


@pytest.fixture
def app_config():
    config = AppConfig()
    config.identity.user_id = "api-test-user"
    config.location.source = "push"
    config.logging.level = "warning"
    return config


@pytest.fixture
async def ripple_client(app_config, scripted, notifier):
    """A started RippleClient installed on the API app, like the lifespan does."""
    client = RippleClient(app_config, transport=scripted, notifier=notifier)
    main_module.app.state.client = client
    await client.start()

    yield client

    await client.stop()
    main_module.app.state.client = None


@pytest.fixture
async def api(ripple_client):
    transport = ASGITransport(app=main_module.app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def transport_error():
    return TransportError("server returned HTTP 500", status_code=500)
