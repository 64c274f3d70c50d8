"""
JWT issuance and verification.

Access and refresh tokens differ only by a ``type`` claim: refresh tokens carry
``type="refresh"``, access tokens carry none. Nothing is stored server side, so
a refresh token stays valid until it expires.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from uuid import UUID

import jwt

from account_api.application.service_result import ErrorCode
from account_api.domain.models.user import User
from account_api.domain.schemas.auth import TokenResponse
from account_api.security.exceptions import InvalidTokenError

TYPE_CLAIM = "type"
REFRESH_TYPE = "refresh"


class TokenType(Enum):
    ACCESS = "access"
    REFRESH = "refresh"


class JwtTokenIssuer:
    def __init__(
        self,
        secret: str,
        issuer: str,
        audience: str,
        access_ttl: timedelta = timedelta(hours=1),
        refresh_ttl: timedelta = timedelta(days=1),
        algorithm: str = "HS256",
    ) -> None:
        self._secret = secret
        self._issuer = issuer
        self._audience = audience
        self._access_ttl = access_ttl
        self._refresh_ttl = refresh_ttl
        self._algorithm = algorithm

    def issue_access_token(self, user: User) -> str:
        return self._encode(user, self._access_ttl)

    def issue_refresh_token(self, user: User) -> str:
        return self._encode(user, self._refresh_ttl, {TYPE_CLAIM: REFRESH_TYPE})

    def issue_pair(self, user: User) -> TokenResponse:
        return TokenResponse(
            access_token=self.issue_access_token(user),
            refresh_token=self.issue_refresh_token(user),
        )

    def decode(self, token: str, expected: TokenType = TokenType.ACCESS) -> UUID:
        """
        Verify signature, issuer, audience and expiry, check the token type and
        return the subject. Raises InvalidTokenError on any failure.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
                options={"require": ["exp", "sub"]},
            )
        except jwt.PyJWTError as e:
            raise InvalidTokenError(f"Token rejected: {e}") from e

        is_refresh = claims.get(TYPE_CLAIM) == REFRESH_TYPE
        if is_refresh != (expected is TokenType.REFRESH):
            raise InvalidTokenError(f"Expected a {expected.value} token")

        try:
            return UUID(claims["sub"])
        except (TypeError, ValueError) as e:
            raise InvalidTokenError("Token subject is not a valid user id", code=ErrorCode.INVALID_TOKEN) from e

    def _encode(self, user: User, ttl: timedelta, extra_claims: dict | None = None) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user.id),
            "iss": self._issuer,
            "aud": self._audience,
            "iat": now,
            "exp": now + ttl,
        }
        if extra_claims:
            claims.update(extra_claims)
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)
