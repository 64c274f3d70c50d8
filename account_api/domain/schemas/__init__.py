"""Domain schemas. Request/response and validation."""

from account_api.domain.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from account_api.domain.schemas.error import ErrorResponse

__all__ = [
    "ErrorResponse",
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "UserResponse",
]
