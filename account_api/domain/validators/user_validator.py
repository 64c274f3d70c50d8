"""Validators for account rules. Pure functions, no infrastructure or DB access."""

from account_api.domain.exceptions import DomainValidationError
from account_api.domain.schemas.auth import RegisterRequest

# Minimum password length (domain constant; avoid magic numbers)
PASSWORD_MIN_LENGTH = 6


def validate_nickname(nickname: str) -> None:
    """Nickname must not be blank. Raises DomainValidationError if invalid."""
    if not nickname or not nickname.strip():
        raise DomainValidationError("Nickname must not be empty")


def validate_email(email: str) -> None:
    """
    Email must be non-blank and contain '@'. Intentionally permissive: anything
    stricter would reject addresses existing clients already register with.
    """
    if not email or not email.strip() or "@" not in email:
        raise DomainValidationError("Email format is invalid")


def validate_password(password: str, min_length: int = PASSWORD_MIN_LENGTH) -> None:
    """Password must be at least min_length characters."""
    if password is None or len(password) < min_length:
        raise DomainValidationError(f"Password must be at least {min_length} characters")


def validate_register_request(
    request: RegisterRequest,
    password_min_length: int = PASSWORD_MIN_LENGTH,
) -> None:
    """
    Validate a registration request: nickname, email, password, in that order.
    The first violation wins.
    """
    validate_nickname(request.nickname)
    validate_email(request.email)
    validate_password(request.password, password_min_length)
