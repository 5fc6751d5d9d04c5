from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.db import get_db, init_db
from app.main import app
from app.models.weather import WeatherSnapshot


@pytest.fixture
def mock_http(monkeypatch):
    """Route every ``httpx.AsyncClient`` through a handler and record requests."""

    def install(handler):
        calls: list[httpx.Request] = []

        def recording(request):
            calls.append(request)
            return handler(request)

        transport = httpx.MockTransport(recording)
        real_client = httpx.AsyncClient

        def fake_client(**kwargs):
            return real_client(transport=transport, **kwargs)

        monkeypatch.setattr(httpx, "AsyncClient", fake_client)
        return calls

    return install


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def api_client(db_session, monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "require_api_key", False)
    monkeypatch.setattr(settings, "webhook_state_dir", str(tmp_path / "webhooks"))

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)
    try:
        yield client
    finally:
        client.close()
        app.dependency_overrides.clear()


@pytest.fixture
def snapshot() -> WeatherSnapshot:
    return WeatherSnapshot(
        city="London",
        temperature=15,
        condition="Partly Cloudy",
        air_quality_label="Moderate",
        air_quality_index=2,
    )
