"""
Pytest configuration and fixtures for Concert Buddy tests.
"""
import os
import json

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Set test database and relaxed limits before importing the app
os.environ["DATABASE_URL"] = "sqlite:///./test_concert_buddy.db"
os.environ["AUTH_ENABLED"] = "true"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_DEMO_DATA"] = "false"

from concert_buddy import app  # noqa: E402
from concert_buddy.database import database, engine, metadata  # noqa: E402

SQUARE_LAYOUT = json.dumps({"sections": [
    {"id": "a", "name": "Section A", "color": "#3b82f6", "path": "M0 0 L100 0 L100 100 L0 100 Z"},
    {"id": "b", "name": "Section B", "color": "#10b981", "path": "M200 200 L300 200 L300 300 L200 300 Z"},
]})


@pytest_asyncio.fixture
async def setup_database():
    """Fresh tables for every test."""
    metadata.drop_all(engine)
    metadata.create_all(engine)
    await database.connect()
    yield
    await database.disconnect()


@pytest.fixture(scope="session", autouse=True)
def cleanup_database_file():
    yield
    engine.dispose()
    if os.path.exists("test_concert_buddy.db"):
        os.remove("test_concert_buddy.db")


@pytest_asyncio.fixture
async def client(setup_database):
    """Async HTTP client for API testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _register(client, email, display_name):
    response = await client.post("/auth/register", json={"email": email, "display_name": display_name})
    data = response.json()["data"]
    return {"id": data["user_id"], "headers": {"X-API-Key": data["api_key"]}}


@pytest_asyncio.fixture
async def alice(client):
    return await _register(client, "alice@example.com", "Alice Cooper")


@pytest_asyncio.fixture
async def bob(client):
    return await _register(client, "bob@example.com", "Bob Dylan")


@pytest_asyncio.fixture
async def test_venue(client):
    """Venue with two square sections."""
    response = await client.post("/venues", json={
        "id": "test_venue",
        "name": "Test Arena",
        "description": "Test venue",
        "seating_chart_data": SQUARE_LAYOUT,
    })
    assert response.status_code == 200
    return "test_venue"


@pytest_asyncio.fixture
async def test_room(client, alice, test_venue):
    response = await client.post("/rooms", json={"name": "Friday Show", "venue_id": test_venue},
                                 headers=alice["headers"])
    assert response.status_code == 201
    return response.json()["data"]
