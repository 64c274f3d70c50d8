"""Security: password hashing, JWT issuance and verification. No FastAPI."""

from account_api.security.exceptions import InvalidTokenError, SecurityError
from account_api.security.passwords import PasswordHasher
from account_api.security.tokens import JwtTokenIssuer, TokenType

__all__ = [
    "InvalidTokenError",
    "JwtTokenIssuer",
    "PasswordHasher",
    "SecurityError",
    "TokenType",
]
