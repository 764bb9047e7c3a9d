from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from hookrelay.core.settings import Settings
from hookrelay.db.session import build_engine, build_session_factory, init_db

API_KEY = "test-api-key"


class RecordingSubscribers:
    """Stand-in for subscriber servers behind ``httpx.MockTransport``.

    Hosts listed in ``timeouts`` or ``refused`` fail at the transport level;
    every other host answers with ``status_code``.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.timeouts: set[str] = set()
        self.refused: set[str] = set()
        self.status_code = 200

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        if host in self.timeouts:
            raise httpx.ReadTimeout("timed out", request=request)
        if host in self.refused:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(self.status_code, text="ok")

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture()
def db_session():
    """In-memory SQLite session with all tables created."""
    engine = build_engine("sqlite+pysqlite:///:memory:")
    init_db(engine)
    session = build_session_factory(engine)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite+pysqlite:///:memory:",
        API_KEY=API_KEY,
        FANOUT_IN_BACKGROUND=False,
    )


@pytest.fixture()
def subscribers() -> RecordingSubscribers:
    return RecordingSubscribers()


@pytest.fixture()
def client(settings: Settings, subscribers: RecordingSubscribers) -> TestClient:
    from hookrelay.api.main import create_app

    app = create_app(settings, transport=subscribers.transport())
    with TestClient(app) as test_client:
        yield test_client
