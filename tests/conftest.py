"""Shared test fixtures for Recipe Organizer API tests"""

import os
from typing import AsyncGenerator
from unittest.mock import MagicMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tinydb.storages import MemoryStorage

# Set test environment before importing app
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-0123456789"
os.environ["DATABASE_PATH"] = "/tmp/test_recipes.json"
os.environ["APP_ENV"] = "development"

from recipe_organizer.auth.jwt import create_user_token  # noqa: E402
from recipe_organizer.services.database_service import db_service  # noqa: E402
from tests.factories import create_user  # noqa: E402


# =============================================================================
# Database
# =============================================================================

@pytest.fixture(autouse=True)
def db():
    """Fresh in-memory database for every test"""
    db_service.configure(storage=MemoryStorage)
    yield db_service
    db_service.configure(storage=MemoryStorage)


@pytest.fixture
def mock_db():
    """Mock database service for error-path tests.

    Patches db_service in all modules that import it.
    """
    mock = MagicMock()
    mock.get_user_by_id.return_value = None
    mock.get_user_by_email.return_value = None
    mock.get_recipe.return_value = None

    with patch("recipe_organizer.auth.jwt.db_service", mock), \
         patch("recipe_organizer.routes.auth.db_service", mock), \
         patch("recipe_organizer.routes.users.db_service", mock), \
         patch("recipe_organizer.routes.recipes.db_service", mock), \
         patch("recipe_organizer.routes.pantry.db_service", mock):
        yield mock


# =============================================================================
# Application and Client Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def app():
    from recipe_organizer.main import app as fastapi_app
    return fastapi_app


@pytest_asyncio.fixture
async def test_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client calling the app in-process"""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# =============================================================================
# Users
# =============================================================================

def auth_headers(user: dict) -> dict:
    """HTTP headers with a JWT for ``user``"""
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def make_user(db):
    """Store a user and return it with ready-made auth headers"""
    def _make_user(name: str = "Test User", email: str = None, password: str = "secret123") -> dict:
        user = db.create_user(create_user(name=name, email=email, password=password))
        user["headers"] = auth_headers(user)
        return user
    return _make_user


@pytest.fixture
def test_user(make_user):
    return make_user(name="Test User")


@pytest.fixture
def other_user(make_user):
    return make_user(name="Other User")


@pytest.fixture
def jwt_headers(test_user) -> dict:
    return test_user["headers"]
