"""Fixtures for API unit tests: in-memory repository and Redis, real event bus, AsyncClient."""

import pytest
from httpx import ASGITransport, AsyncClient

from account_api.events.bus import EventBus
from account_api.main import app


@pytest.fixture
def test_event_bus():
    bus = EventBus()
    yield bus
    bus.shutdown()


@pytest.fixture
def app_with_overrides(user_repository, fake_redis, password_hasher, test_event_bus):
    """App with repository, Redis, hasher and event bus overridden for testing."""
    from account_api.api import dependencies

    app.dependency_overrides[dependencies.get_user_repository] = lambda: user_repository
    app.dependency_overrides[dependencies.get_redis_client] = lambda: fake_redis
    app.dependency_overrides[dependencies.get_password_hasher] = lambda: password_hasher
    app.dependency_overrides[dependencies.get_event_bus] = lambda: test_event_bus
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app_with_overrides):
    """Async HTTP client for testing; uses overridden app."""
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def register_body():
    return {"nickname": "Al", "email": "a@b.com", "password": "secret1"}


@pytest.fixture
def login_tokens(async_client, register_body):
    """Register the default user and return its token pair."""

    async def _login() -> dict:
        await async_client.post("/auth/register", json=register_body)
        r = await async_client.post(
            "/auth/login",
            json={"email": register_body["email"], "password": register_body["password"]},
        )
        assert r.status_code == 200
        return r.json()

    return _login
