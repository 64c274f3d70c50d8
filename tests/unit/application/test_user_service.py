"""Unit tests for UserService: register, login, current user, refresh."""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from account_api.application.service_result import Error, ErrorCode, Success
from account_api.application.user_service import PROFILE_CACHE_PREFIX, UserService
from account_api.domain.schemas.auth import LoginRequest, RegisterRequest, UserResponse
from account_api.events.bus import EventBus
from account_api.events.user_events import UserLoggedIn, UserRegistered
from account_api.security.tokens import TokenType


@pytest.fixture
def event_bus():
    bus = AsyncMock(spec=EventBus)
    bus.publish = AsyncMock(return_value=None)
    return bus


@pytest.fixture
def logger():
    return MagicMock()


@pytest.fixture
def user_service(user_repository, event_bus, token_issuer, password_hasher, logger, fake_redis):
    return UserService(
        repository=user_repository,
        event_bus=event_bus,
        token_issuer=token_issuer,
        password_hasher=password_hasher,
        logger=logger,
        cache=fake_redis,
    )


def _register(email="a@b.com", password="secret1", nickname="Al", long_id=None) -> RegisterRequest:
    return RegisterRequest(nickname=nickname, email=email, password=password, long_id=long_id)


async def _registered(user_service, user_repository, email="a@b.com", password="secret1"):
    result = await user_service.register(_register(email=email, password=password))
    assert isinstance(result, Success)
    return await user_repository.find_by_email(email)


# ---------- register ----------


async def test_register_returns_new_user(user_service, user_repository):
    result = await user_service.register(_register(long_id="al-01"))

    assert isinstance(result, Success)
    assert result.data.email == "a@b.com"
    assert result.data.nickname == "Al"
    assert result.data.long_id == "al-01"
    stored = await user_repository.find_by_email("a@b.com")
    assert str(stored.id) == result.data.uuid


async def test_register_stores_bcrypt_hash_not_password(user_service, user_repository, password_hasher):
    await user_service.register(_register())

    stored = await user_repository.find_by_email("a@b.com")
    assert stored.password_hash != "secret1"
    assert password_hasher.verify("secret1", stored.password_hash)


async def test_register_publishes_user_registered(user_service, event_bus, user_repository):
    await user_service.register(_register())

    event_bus.publish.assert_awaited_once()
    event = event_bus.publish.await_args.args[0]
    assert isinstance(event, UserRegistered)
    assert event.user == await user_repository.find_by_email("a@b.com")


async def test_register_same_email_twice_is_email_exists(user_service, event_bus):
    await user_service.register(_register())
    event_bus.publish.reset_mock()

    result = await user_service.register(_register(nickname="Other"))

    assert result == Error(ErrorCode.EMAIL_EXISTS, result.message, 409)
    event_bus.publish.assert_not_awaited()


@pytest.mark.parametrize(
    "request_kwargs",
    [
        {"password": "ab"},
        {"nickname": ""},
        {"nickname": "   "},
        {"email": "not-an-email"},
        {"email": ""},
    ],
)
async def test_register_invalid_input_is_validation_error(
    user_service, user_repository, event_bus, request_kwargs
):
    result = await user_service.register(_register(**request_kwargs))

    assert isinstance(result, Error)
    assert result.code == ErrorCode.VALIDATION_ERROR
    assert result.status_code == 400
    assert user_repository.users == {}
    event_bus.publish.assert_not_awaited()


async def test_register_validation_messages_are_distinct(user_service):
    messages = set()
    for kwargs in ({"nickname": ""}, {"email": "nope"}, {"password": "ab"}):
        result = await user_service.register(_register(**kwargs))
        messages.add(result.message)
    assert len(messages) == 3


async def test_register_accepts_any_email_with_at_sign(user_service):
    result = await user_service.register(_register(email="x@"))
    assert isinstance(result, Success)


async def test_register_password_of_exactly_min_length_is_accepted(user_service):
    result = await user_service.register(_register(password="123456"))
    assert isinstance(result, Success)


async def test_register_repository_fault_propagates(user_service, user_repository):
    user_repository.find_by_email = AsyncMock(side_effect=ConnectionError("db down"))

    with pytest.raises(ConnectionError):
        await user_service.register(_register())


# ---------- login ----------


async def test_login_wrong_password_is_invalid_credentials(user_service, user_repository):
    await _registered(user_service, user_repository)

    result = await user_service.login(LoginRequest(email="a@b.com", password="wrong-password"))

    assert isinstance(result, Error)
    assert result.code == ErrorCode.INVALID_CREDENTIALS
    assert result.status_code == 401


async def test_login_unknown_email_matches_wrong_password(user_service, user_repository):
    await _registered(user_service, user_repository)

    unknown = await user_service.login(LoginRequest(email="nobody@b.com", password="secret1"))
    wrong = await user_service.login(LoginRequest(email="a@b.com", password="bad"))

    assert unknown == wrong


async def test_login_publishes_exactly_one_logged_in_event(user_service, user_repository, event_bus):
    user = await _registered(user_service, user_repository)
    event_bus.publish.reset_mock()

    result = await user_service.login(LoginRequest(email="a@b.com", password="secret1"))

    assert isinstance(result, Success)
    event_bus.publish.assert_awaited_once()
    event = event_bus.publish.await_args.args[0]
    assert isinstance(event, UserLoggedIn)
    assert event.kind == "user.logged_in"
    assert event.user.id == user.id


async def test_login_issues_access_and_refresh_tokens(user_service, user_repository, token_issuer):
    user = await _registered(user_service, user_repository)

    result = await user_service.login(LoginRequest(email="a@b.com", password="secret1"))

    assert token_issuer.decode(result.data.access_token, TokenType.ACCESS) == user.id
    assert token_issuer.decode(result.data.refresh_token, TokenType.REFRESH) == user.id


async def test_failed_login_publishes_nothing(user_service, user_repository, event_bus):
    await _registered(user_service, user_repository)
    event_bus.publish.reset_mock()

    await user_service.login(LoginRequest(email="a@b.com", password="bad"))

    event_bus.publish.assert_not_awaited()


# ---------- current user ----------


async def test_get_current_user_missing_is_user_not_found(user_service):
    result = await user_service.get_current_user(uuid.uuid4())

    assert isinstance(result, Error)
    assert result.code == ErrorCode.USER_NOT_FOUND
    assert result.status_code == 404


async def test_get_current_user_caches_profile(user_service, user_repository, fake_redis):
    user = await _registered(user_service, user_repository)

    result = await user_service.get_current_user(user.id)

    assert result.data.uuid == str(user.id)
    assert await fake_redis.get_cache(f"{PROFILE_CACHE_PREFIX}{user.id}") is not None


async def test_get_current_user_served_from_cache(user_service, user_repository):
    user = await _registered(user_service, user_repository)
    await user_service.get_current_user(user.id)
    user_repository.find_by_id = AsyncMock(side_effect=AssertionError("repository should not be hit"))

    result = await user_service.get_current_user(user.id)

    assert isinstance(result, Success)
    assert result.data.email == "a@b.com"


async def test_get_current_user_without_cache(user_repository, event_bus, token_issuer, password_hasher, logger):
    service = UserService(
        repository=user_repository,
        event_bus=event_bus,
        token_issuer=token_issuer,
        password_hasher=password_hasher,
        logger=logger,
    )
    user = await _registered(service, user_repository)

    result = await service.get_current_user(user.id)

    assert result.data.nickname == "Al"


# ---------- refresh ----------


async def test_refresh_token_returns_new_pair(user_service, user_repository, token_issuer):
    user = await _registered(user_service, user_repository)

    result = await user_service.refresh_token(user.id)

    assert isinstance(result, Success)
    assert token_issuer.decode(result.data.refresh_token, TokenType.REFRESH) == user.id


async def test_refresh_token_missing_user_is_session_user_missing(user_service):
    result = await user_service.refresh_token(uuid.uuid4())

    assert isinstance(result, Error)
    assert result.code == ErrorCode.SESSION_USER_MISSING
    assert result.status_code == 401


async def test_get_current_user_corrupt_cache_falls_back_to_repository(
    user_service, user_repository, fake_redis, logger
):
    user = await _registered(user_service, user_repository)
    key = f"{PROFILE_CACHE_PREFIX}{user.id}"
    await fake_redis.set_cache(key, "{not json")

    result = await user_service.get_current_user(user.id)

    assert isinstance(result, Success)
    assert result.data.uuid == str(user.id)
    assert UserResponse.model_validate_json(await fake_redis.get_cache(key)) == result.data
    assert any(c.args[0] == "profile_cache_corrupt" for c in logger.warning.call_args_list)


async def test_get_current_user_stale_cache_shape_is_replaced(user_service, user_repository, fake_redis):
    user = await _registered(user_service, user_repository)
    key = f"{PROFILE_CACHE_PREFIX}{user.id}"
    await fake_redis.set_cache(key, '{"id": "old-format"}')

    result = await user_service.get_current_user(user.id)

    assert result.data.email == "a@b.com"


# ---------- long passwords ----------


async def test_register_and_login_with_80_character_password(user_service, user_repository):
    password = "p" * 80

    registered = await user_service.register(_register(password=password))
    assert isinstance(registered, Success)

    result = await user_service.login(LoginRequest(email="a@b.com", password=password))
    assert isinstance(result, Success)
