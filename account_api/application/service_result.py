"""
Two-variant outcome returned by application services.

Services return ``Success`` or ``Error`` for expected business outcomes
(validation, conflict, not-found, bad credentials) and raise only for
unexpected faults, which the global exception handlers in ``main`` map to
responses. The HTTP adapter lives in ``account_api.api.responses``.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorCode:
    """Stable machine-readable error codes shared with clients."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    EMAIL_EXISTS = "EMAIL_EXISTS"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    SESSION_USER_MISSING = "SESSION_USER_MISSING"
    CONFLICT = "CONFLICT"
    UNAUTHORIZED = "UNAUTHORIZED"
    RATE_LIMITED = "RATE_LIMITED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    INVALID_TOKEN = "AUTH_001"


@dataclass(frozen=True)
class Success(Generic[T]):
    """The operation produced a value."""

    data: T

    @property
    def is_success(self) -> bool:
        return True

    @property
    def is_error(self) -> bool:
        return False


@dataclass(frozen=True)
class Error:
    """The operation failed in an expected way. status_code is the HTTP status the adapter should use."""

    code: str
    message: str
    status_code: int = 400

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_error(self) -> bool:
        return True


ServiceResult = Union[Success[T], Error]


class ServiceResultError(Exception):
    """Raised by unwrap_result for callers that want a value or an exception instead of a result."""

    def __init__(self, code: str, message: str, status_code: int = 400) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(f"{code}: {message}")


def unwrap_result(result: "ServiceResult[T]") -> T:
    """Return the Success payload or raise ServiceResultError carrying the Error fields."""
    if isinstance(result, Success):
        return result.data
    raise ServiceResultError(result.code, result.message, result.status_code)
