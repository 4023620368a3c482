"""
Pytest configuration and fixtures.
"""

import os
import sys
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment before settings are first read
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from api.server import create_app
from core.config import Settings
from core.entities import Role
from core.security import create_access_token
from core.storage import StorageContext, create_memory_context
from services.credentials import CredentialService


PASSWORD = "secret123"


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        storage_backend="memory",
        environment="development",
        debug=True,
        jwt_secret_key="test-jwt-secret-key-for-testing-only-0123456789",
        bcrypt_rounds=4,
        admin_email="root@karesgbd.acm.org",
        admin_password="rootpass",
        admin_bootstrap_delay_seconds=0.0,
    )


@pytest.fixture
def storage() -> StorageContext:
    """Empty in-memory storage, fresh per test."""
    return create_memory_context()


@pytest.fixture
def credentials(storage: StorageContext, test_settings: Settings) -> CredentialService:
    return CredentialService(storage.users, test_settings)


@pytest.fixture
def app(test_settings: Settings, storage: StorageContext, credentials: CredentialService):
    """
    App wired to the test storage.

    ASGITransport does not run the lifespan, so the state it would set up
    is assigned directly.
    """
    application = create_app(test_settings)
    application.state.storage = storage
    application.state.credentials = credentials
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _make_user(credentials: CredentialService, role: Role, email: str) -> dict:
    return await credentials.register(
        name=f"Test {role.value.title()}",
        email=email,
        password=PASSWORD,
        role=role,
    )


def _headers(user: dict, settings: Settings) -> dict:
    token = create_access_token(user["id"], user["role"], settings=settings)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def admin_user(credentials: CredentialService) -> dict:
    return await _make_user(credentials, Role.ADMIN, "admin@test.org")


@pytest_asyncio.fixture
async def moderator_user(credentials: CredentialService) -> dict:
    return await _make_user(credentials, Role.MODERATOR, "moderator@test.org")


@pytest_asyncio.fixture
async def member_user(credentials: CredentialService) -> dict:
    return await _make_user(credentials, Role.MEMBER, "member@test.org")


@pytest.fixture
def admin_headers(admin_user: dict, test_settings: Settings) -> dict:
    return _headers(admin_user, test_settings)


@pytest.fixture
def moderator_headers(moderator_user: dict, test_settings: Settings) -> dict:
    return _headers(moderator_user, test_settings)


@pytest.fixture
def member_headers(member_user: dict, test_settings: Settings) -> dict:
    return _headers(member_user, test_settings)
