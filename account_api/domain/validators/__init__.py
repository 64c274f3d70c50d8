"""Domain validators. Pure validation functions."""

from account_api.domain.validators.user_validator import (
    PASSWORD_MIN_LENGTH,
    validate_email,
    validate_nickname,
    validate_password,
    validate_register_request,
)

__all__ = [
    "PASSWORD_MIN_LENGTH",
    "validate_email",
    "validate_nickname",
    "validate_password",
    "validate_register_request",
]
