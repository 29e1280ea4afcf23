"""Shared pytest fixtures configured to use SQLite in-memory for tests."""

import logging
from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from src.notevault.config import Settings, get_settings
from src.notevault.core.models import BaseModel
from src.notevault.core.redis_client import get_redis_client
from src.notevault.database import build_engine, get_db_session
from src.notevault.main import app
from tests.helpers import (
    DEFAULT_PASSWORD,
    AuthenticatedUser,
    FakeRedisClient,
    refresh_cookie_from,
)

# aiosqlite is very chatty at DEBUG
logging.getLogger("aiosqlite").setLevel(logging.WARNING)


@pytest.fixture
def test_settings(tmp_path):
    """Settings with every secret set, rate limiting off and files under tmp_path."""
    return Settings(
        environment="test",
        database_url="sqlite+aiosqlite:///:memory:",
        access_token_secret="test-access-secret",
        refresh_token_secret="test-refresh-secret",
        refresh_token_store_secret="test-store-secret",
        password_hash_secret="test-password-secret",
        rate_limit_enabled=False,
        log_dir=str(tmp_path / "logs"),
        attachment_dir=str(tmp_path / "attachments"),
    )


@pytest.fixture
async def test_engine(test_settings):
    """Fresh in-memory database per test; StaticPool keeps a single connection."""
    engine = build_engine(
        test_settings.database_url,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_redis():
    return FakeRedisClient()


@pytest.fixture
async def client(test_settings, session_factory, fake_redis):
    """HTTP client on the app; each request gets its own DB session."""

    async def _override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_redis_client] = lambda: fake_redis

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client):
    """Register through the API and return the session it started."""

    async def _register(
        username: str, password: str = DEFAULT_PASSWORD, device: str = "laptop"
    ) -> AuthenticatedUser:
        email = f"{username}@example.com"
        response = await client.post(
            "/api/auth/register",
            json={"username": username, "email": email, "password": password},
            headers={"X-Device": device},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return AuthenticatedUser(
            id=UUID(body["user"]["id"]),
            username=username,
            email=email,
            password=password,
            access_token=body["access_token"],
            refresh_token=refresh_cookie_from(response),
            device=device,
        )

    return _register


@pytest.fixture
def login_user(client):
    async def _login(user: AuthenticatedUser, device: str) -> AuthenticatedUser:
        response = await client.post(
            "/api/auth/login",
            json={"email": user.email, "password": user.password},
            headers={"X-Device": device},
        )
        assert response.status_code == 200, response.text
        return AuthenticatedUser(
            id=user.id,
            username=user.username,
            email=user.email,
            password=user.password,
            access_token=response.json()["access_token"],
            refresh_token=refresh_cookie_from(response),
            device=device,
        )

    return _login


@pytest.fixture
async def alice(register_user):
    return await register_user("alice")


@pytest.fixture
async def bob(register_user):
    return await register_user("bob")


@pytest.fixture
async def carol(register_user):
    return await register_user("carol")


@pytest.fixture
def create_note(client):
    async def _create(
        user: AuthenticatedUser, title: str = "Groceries", content: str = "<p>milk</p>"
    ) -> dict:
        response = await client.post(
            "/api/notes", json={"title": title, "content": content}, headers=user.headers
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create
