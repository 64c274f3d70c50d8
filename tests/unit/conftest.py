"""Shared fakes for unit tests: in-memory user repository, in-memory Redis, fast security helpers."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from account_api.application.exceptions import ConflictError
from account_api.domain.models.user import User
from account_api.security.passwords import PasswordHasher
from account_api.security.tokens import JwtTokenIssuer

TEST_SECRET = "unit-test-secret-unit-test-secret-0000"


class InMemoryUserRepository:
    """UserRepository backed by a dict. Mirrors DbUserRepository's duplicate-email behaviour."""

    def __init__(self) -> None:
        self.users: dict[uuid.UUID, User] = {}

    async def find_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    async def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return self.users.get(user_id)

    async def create(
        self,
        nickname: str,
        email: str,
        password_hash: str,
        long_id: Optional[str] = None,
    ) -> User:
        if await self.find_by_email(email) is not None:
            raise ConflictError(f"User with email {email} already exists")
        user = User(
            id=uuid.uuid4(),
            nickname=nickname,
            email=email,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
            long_id=long_id,
        )
        self.users[user.id] = user
        return user


class FakeRedis:
    """In-memory Redis for unit tests."""

    def __init__(self):
        self._store: dict[str, str] = {}
        self._counters: dict[str, int] = {}

    async def get_cache(self, key: str):
        return self._store.get(key)

    async def set_cache(self, key: str, value: str, ttl: int = 300):
        self._store[key] = value

    async def delete_key(self, key: str) -> None:
        self._store.pop(key, None)

    async def incr_window(self, key: str, window_seconds: int) -> int:
        self._counters[key] = self._counters.get(key, 0) + 1
        return self._counters[key]


@pytest.fixture
def user_repository():
    return InMemoryUserRepository()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def password_hasher():
    # Minimum bcrypt cost keeps the suite fast.
    return PasswordHasher(rounds=4)


@pytest.fixture
def jwt_secret():
    return TEST_SECRET


@pytest.fixture
def token_issuer(jwt_secret):
    return JwtTokenIssuer(
        secret=jwt_secret,
        issuer="account-api-test",
        audience="account-api-test-users",
        access_ttl=timedelta(minutes=5),
        refresh_ttl=timedelta(minutes=30),
    )


@pytest.fixture
def make_user():
    def _make(
        nickname: str = "Al",
        email: str = "a@b.com",
        password_hash: str = "not-a-hash",
    ) -> User:
        return User(
            id=uuid.uuid4(),
            nickname=nickname,
            email=email,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )

    return _make
