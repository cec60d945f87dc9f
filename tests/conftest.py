"""
Pytest configuration and fixtures.

The application reads its settings at import time, so the test database and
secrets are put in the environment before anything from ``bistro`` is imported.
"""

import asyncio
import os
import tempfile
from pathlib import Path

_DB_PATH = Path(tempfile.gettempdir()) / f"bistro-test-{os.getpid()}.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "admin123"
os.environ["ADMIN_SESSION_SECRET"] = "test-session-secret"
os.environ["ENFORCE_FORWARD_STATUS_FLOW"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from bistro.database import AsyncSessionLocal, Base, engine  # noqa: E402
from bistro.main import app  # noqa: E402
from bistro.services.menu_service import seed_menu  # noqa: E402


async def _reset_database() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    await seed_menu()


@pytest.fixture(scope="session", autouse=True)
def _remove_test_database():
    yield
    _DB_PATH.unlink(missing_ok=True)


@pytest.fixture
async def db():
    """A session on a freshly seeded database."""
    await _reset_database()
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
def client():
    asyncio.run(_reset_database())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(client):
    response = client.post("/api/admin/login", json={"username": "admin", "password": "admin123"})
    assert response.status_code == 200
    return client


@pytest.fixture
def customer():
    return {
        "customerName": "Giulia Rossi",
        "customerEmail": "giulia@example.com",
        "customerPhone": "5550100123",
    }


@pytest.fixture
def place_order(client, customer):
    """Create an order through the API and return the response body."""

    def _place(items, **overrides):
        body = {**customer, **overrides, "items": items}
        response = client.post("/api/orders", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _place
