"""Shared fixtures: every test gets a fresh in-memory SQLite database."""

import pytest
from fastapi.testclient import TestClient

from tracker.core.config import Settings
from tracker.db import Database
from tracker.main import create_app

MEMORY_URL = "sqlite+pysqlite:///:memory:"


@pytest.fixture()
def settings():
    return Settings(database_url=MEMORY_URL, create_tables=True, week_starts_on=0)


@pytest.fixture()
def app(settings):
    app = create_app(settings)
    yield app
    app.state.database.dispose()


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def db():
    """A bare session for store-level tests (no HTTP layer)."""
    database = Database(MEMORY_URL)
    database.create_all()
    session = database.session()
    try:
        yield session
    finally:
        session.close()
        database.dispose()


def make_metric(client, name="NPS", **extra):
    payload = {"name": name, **extra}
    r = client.post("/api/metrics/", json=payload)
    assert r.status_code == 201, r.text
    return r.json()
