# Application layer: services that orchestrate domain and infrastructure.
# UserService is imported from its module; the security layer depends on this package.
from account_api.application.exceptions import ApplicationError, ConflictError
from account_api.application.service_result import (
    Error,
    ErrorCode,
    ServiceResult,
    ServiceResultError,
    Success,
    unwrap_result,
)
from account_api.application.user_repository import UserRepository

__all__ = [
    "ApplicationError",
    "ConflictError",
    "Error",
    "ErrorCode",
    "ServiceResult",
    "ServiceResultError",
    "Success",
    "UserRepository",
    "unwrap_result",
]
