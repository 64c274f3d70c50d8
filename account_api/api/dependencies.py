"""FastAPI dependency injection: Redis, event bus, security helpers, UserService, bearer auth."""

import logging
from datetime import timedelta
from functools import lru_cache
from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from account_api.application.user_repository import UserRepository
from account_api.application.user_service import UserService
from account_api.config.settings import get_settings
from account_api.core.context import user_id_ctx
from account_api.events.bus import EventBus, event_bus
from account_api.infrastructure.cache.redis_client import RedisClient
from account_api.infrastructure.database.session import get_db
from account_api.infrastructure.database.user_repository_db import DbUserRepository
from account_api.security.exceptions import InvalidTokenError
from account_api.security.passwords import PasswordHasher
from account_api.security.tokens import JwtTokenIssuer, TokenType

logger = logging.getLogger(__name__)

_redis_client: RedisClient | None = None
_bearer = HTTPBearer(auto_error=False)


def get_redis_client() -> RedisClient:
    """Return singleton Redis client."""
    global _redis_client
    if _redis_client is None:
        _redis_client = RedisClient()
    return _redis_client


def get_event_bus() -> EventBus:
    """Return the process-wide event bus."""
    return event_bus


@lru_cache
def get_token_issuer() -> JwtTokenIssuer:
    settings = get_settings()
    return JwtTokenIssuer(
        secret=settings.jwt_secret,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        access_ttl=timedelta(minutes=settings.jwt_access_expiration_minutes),
        refresh_ttl=timedelta(minutes=settings.jwt_refresh_expiration_minutes),
        algorithm=settings.jwt_algorithm,
    )


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=get_settings().bcrypt_rounds)


async def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_db)],
) -> UserRepository:
    return DbUserRepository(session)


async def get_user_service(
    repository: Annotated[UserRepository, Depends(get_user_repository)],
    bus: Annotated[EventBus, Depends(get_event_bus)],
    token_issuer: Annotated[JwtTokenIssuer, Depends(get_token_issuer)],
    password_hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    redis: Annotated[RedisClient, Depends(get_redis_client)],
) -> UserService:
    """Build UserService with injected repository, event bus, token issuer, hasher, cache, logger."""
    settings = get_settings()
    return UserService(
        repository=repository,
        event_bus=bus,
        token_issuer=token_issuer,
        password_hasher=password_hasher,
        logger=logging.getLogger("account_api.application.user_service"),
        cache=redis,
        cache_ttl=settings.profile_cache_ttl_seconds,
        password_min_length=settings.password_min_length,
    )


def _authenticate(
    credentials: Optional[HTTPAuthorizationCredentials],
    token_issuer: JwtTokenIssuer,
    expected: TokenType,
    rejection: str,
) -> UUID:
    if credentials is None:
        raise InvalidTokenError(rejection)
    try:
        user_id = token_issuer.decode(credentials.credentials, expected)
    except InvalidTokenError as e:
        logger.info("token_rejected", extra={"reason": e.message, "token_type": expected.value})
        raise InvalidTokenError(rejection, code=e.code) from e
    user_id_ctx.set(str(user_id))
    return user_id


async def require_access_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(_bearer)],
    token_issuer: Annotated[JwtTokenIssuer, Depends(get_token_issuer)],
) -> UUID:
    """User id from a valid access token. Refresh tokens are rejected."""
    return _authenticate(
        credentials, token_issuer, TokenType.ACCESS, "Access Token is not valid or expired"
    )


async def require_refresh_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(_bearer)],
    token_issuer: Annotated[JwtTokenIssuer, Depends(get_token_issuer)],
) -> UUID:
    """User id from a valid refresh token. Access tokens are rejected."""
    return _authenticate(
        credentials, token_issuer, TokenType.REFRESH, "Refresh Token is not valid or expired"
    )
