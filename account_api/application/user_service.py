"""User account service: register, login, current user, token refresh."""

import logging
from typing import Optional, Protocol
from uuid import UUID

from pydantic import ValidationError

from account_api.application.service_result import Error, ErrorCode, ServiceResult, Success
from account_api.application.user_repository import UserRepository
from account_api.domain.exceptions import DomainValidationError
from account_api.domain.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from account_api.domain.validators.user_validator import (
    PASSWORD_MIN_LENGTH,
    validate_register_request,
)
from account_api.events.bus import EventBus
from account_api.events.user_events import UserLoggedIn, UserRegistered
from account_api.security.passwords import PasswordHasher
from account_api.security.tokens import JwtTokenIssuer

PROFILE_CACHE_PREFIX = "user:profile:"
PROFILE_CACHE_TTL = 300  # 5 minutes


class ProfileCache(Protocol):
    async def get_cache(self, key: str) -> Optional[str]: ...
    async def set_cache(self, key: str, value: str, ttl: int = 300) -> None: ...
    async def delete_key(self, key: str) -> None: ...


def _profile_key(user_id: UUID) -> str:
    return f"{PROFILE_CACHE_PREFIX}{user_id}"


class UserService:
    """
    Application-layer orchestration only. No HTTP, no FastAPI.
    Expected failures come back as Error results; repository and cache faults propagate.
    Events are published after the write they describe has been committed.
    """

    def __init__(
        self,
        repository: UserRepository,
        event_bus: EventBus,
        token_issuer: JwtTokenIssuer,
        password_hasher: PasswordHasher,
        logger: logging.Logger,
        cache: Optional[ProfileCache] = None,
        cache_ttl: int = PROFILE_CACHE_TTL,
        password_min_length: int = PASSWORD_MIN_LENGTH,
    ) -> None:
        self._repository = repository
        self._event_bus = event_bus
        self._tokens = token_issuer
        self._hasher = password_hasher
        self._logger = logger
        self._cache = cache
        self._cache_ttl = cache_ttl
        self._password_min_length = password_min_length

    async def register(self, request: RegisterRequest) -> ServiceResult[UserResponse]:
        """Validate -> check email uniqueness -> create user -> publish UserRegistered."""
        try:
            validate_register_request(request, self._password_min_length)
        except DomainValidationError as e:
            return Error(ErrorCode.VALIDATION_ERROR, e.message, 400)

        if await self._repository.find_by_email(request.email) is not None:
            self._logger.info("register_email_exists")
            return Error(ErrorCode.EMAIL_EXISTS, "Email is already registered", 409)

        user = await self._repository.create(
            nickname=request.nickname,
            email=request.email,
            password_hash=self._hasher.hash(request.password),
            long_id=request.long_id,
        )
        self._logger.info("user_created", extra={"user_id": str(user.id)})

        await self._event_bus.publish(UserRegistered(user))
        return Success(UserResponse.from_user(user))

    async def login(self, request: LoginRequest) -> ServiceResult[TokenResponse]:
        """Verify credentials -> issue token pair -> publish UserLoggedIn."""
        user = await self._repository.find_by_email(request.email)
        # Same answer for unknown email and wrong password.
        if user is None or not self._hasher.verify(request.password, user.password_hash):
            return Error(ErrorCode.INVALID_CREDENTIALS, "Email or password is incorrect", 401)

        tokens = self._tokens.issue_pair(user)
        await self._event_bus.publish(UserLoggedIn(user))
        return Success(tokens)

    async def get_current_user(self, user_id: UUID) -> ServiceResult[UserResponse]:
        cache_key = _profile_key(user_id)
        if self._cache is not None:
            cached = await self._cache.get_cache(cache_key)
            if cached:
                try:
                    profile = UserResponse.model_validate_json(cached)
                except ValidationError:
                    self._logger.warning(
                        "profile_cache_corrupt", extra={"user_id": str(user_id)}, exc_info=True
                    )
                    await self._cache.delete_key(cache_key)
                else:
                    self._logger.debug("profile_cache_hit", extra={"user_id": str(user_id)})
                    return Success(profile)

        user = await self._repository.find_by_id(user_id)
        if user is None:
            return Error(ErrorCode.USER_NOT_FOUND, "User does not exist", 404)

        profile = UserResponse.from_user(user)
        if self._cache is not None:
            await self._cache.set_cache(cache_key, profile.model_dump_json(), ttl=self._cache_ttl)
        return Success(profile)

    async def refresh_token(self, user_id: UUID) -> ServiceResult[TokenResponse]:
        """
        Issue a new token pair for the subject of a verified refresh token.
        A subject that no longer exists is a broken session, hence 401 and its own code.
        """
        user = await self._repository.find_by_id(user_id)
        if user is None:
            return Error(ErrorCode.SESSION_USER_MISSING, "User for this session no longer exists", 401)
        return Success(self._tokens.issue_pair(user))
