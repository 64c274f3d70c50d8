"""Domain layer: models, schemas, validators, exceptions. Pure business logic only."""

from account_api.domain.exceptions import DomainError, DomainValidationError
from account_api.domain.models import User
from account_api.domain.schemas import (
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from account_api.domain.validators import validate_register_request

__all__ = [
    "DomainError",
    "DomainValidationError",
    "ErrorResponse",
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "User",
    "UserResponse",
    "validate_register_request",
]
