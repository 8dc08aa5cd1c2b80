"""Pytest configuration and fixtures."""
import os

os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from motor.motor_asyncio import AsyncIOMotorClient  # noqa: E402
from pymongo.errors import PyMongoError  # noqa: E402

from app.config import settings  # noqa: E402
from app.database import ensure_indexes  # noqa: E402
from app.main import app  # noqa: E402

API = settings.api_prefix


def make_collection() -> MagicMock:
    """A Motor collection stand-in: awaitable writes, chainable cursors."""
    collection = MagicMock()
    for method in (
        "find_one",
        "insert_one",
        "find_one_and_update",
        "update_many",
        "delete_one",
        "delete_many",
    ):
        setattr(collection, method, AsyncMock())
    collection.find_one.return_value = None

    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=[])
    collection.find.return_value = cursor

    pipeline = MagicMock()
    pipeline.to_list = AsyncMock(return_value=[])
    collection.aggregate.return_value = pipeline

    return collection


@pytest.fixture
def collections():
    """Mock collections keyed by name."""
    return {
        name: make_collection()
        for name in ("users", "clients", "projects", "tasks", "time_entries")
    }


@pytest.fixture
def mock_db(collections):
    """Mock database whose item access returns the matching mock collection."""
    db = MagicMock()
    db.__getitem__.side_effect = lambda key: collections[key]
    return db


@pytest_asyncio.fixture
async def app_client():
    """
    Create a test client with a clean test database.

    This fixture:
    - Skips the test if MongoDB is not reachable
    - Points the app at a throwaway database with all indexes in place
    - Yields an async HTTP client for testing
    - Drops the test database afterwards
    """
    test_client = AsyncIOMotorClient(settings.mongodb_url, serverSelectionTimeoutMS=2000)
    try:
        await test_client.admin.command("ping")
    except PyMongoError:
        test_client.close()
        pytest.skip("MongoDB is not available")

    test_db_name = f"{settings.mongodb_db_name}_test"
    test_db = test_client[test_db_name]
    await test_client.drop_database(test_db_name)
    await ensure_indexes(test_db)

    # Override the database dependency
    from app.database import database
    original_db = database.db
    database.db = test_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    await test_client.drop_database(test_db_name)

    database.db = original_db
    test_client.close()


@pytest.fixture
def login(app_client):
    """Factory: register a user and return bearer headers for them."""

    async def _login(email: str) -> dict:
        await app_client.post(
            f"{API}/auth/register",
            json={"email": email, "password": "password123", "name": "Test User"},
        )
        response = await app_client.post(
            f"{API}/auth/login",
            json={"email": email, "password": "password123"},
        )
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login


@pytest.fixture
def make_task(app_client):
    """Factory: create client -> project -> task for a user and return the task ID."""

    async def _make_task(headers: dict, name: str = "Design") -> str:
        client_resp = await app_client.post(
            f"{API}/clients", json={"name": "Acme"}, headers=headers
        )
        client_id = client_resp.json()["id"]

        project_resp = await app_client.post(
            f"{API}/clients/{client_id}/projects",
            json={"name": "Website"},
            headers=headers,
        )
        project_id = project_resp.json()["id"]

        task_resp = await app_client.post(
            f"{API}/projects/{project_id}/tasks",
            json={"name": name},
            headers=headers,
        )
        return task_resp.json()["id"]

    return _make_task
