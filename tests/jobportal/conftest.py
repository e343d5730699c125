"""Shared fixtures: an app on in-memory SQLite with a controllable session clock."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from jobportal.config import Settings
from jobportal.database import Database
from jobportal.main import create_app
from jobportal.sessions.store import MemorySessionStore

SECRET = "test-session-secret-0123456789"
ORIGIN = "http://localhost:5173"


class FakeClock:
    """Naive-UTC clock that only moves when told to."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, 12, 0, 0)) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def uploads_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def settings(uploads_dir):
    """Settings isolated from the process environment and any .env file."""
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        session_secret=SECRET,
        frontend_url=ORIGIN,
        environment="test",
        uploads_dir=str(uploads_dir),
        session_store="memory",
    )


@pytest.fixture
def database():
    return Database("sqlite://")


@pytest.fixture
def session_store(clock):
    return MemorySessionStore(clock=clock)


@pytest.fixture
def app(settings, database, session_store):
    return create_app(settings, database=database, session_store=session_store)


@pytest.fixture
def client(app):
    """TestClient with lifespan (table creation) running."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(client, database):
    """SQLAlchemy session for inspecting or pre-populating test data."""
    session = database.session()
    try:
        yield session
    finally:
        session.close()


def _register(client, email: str, role: str = "seeker", name: str = "Test User", password: str = "s3cret-pass"):
    """Register (and thereby log in) a user through the API."""
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password, "role": role},
    )
    assert response.status_code == 201, response.text
    return response.json()


def _post_job(client, **overrides):
    payload = {
        "title": "Backend Engineer",
        "company": "TechCo",
        "location": "Remote",
        "description": "Build APIs.",
        "salary_min": 120000,
        "salary_max": 180000,
    }
    payload.update(overrides)
    response = client.post("/api/jobs", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def register(client):
    """Callable registering a user on ``client``: ``register(email, role=...)``."""
    return lambda email, **kwargs: _register(client, email, **kwargs)


@pytest.fixture
def post_job(client):
    """Callable publishing a job as the currently logged-in employer."""
    return lambda **overrides: _post_job(client, **overrides)
