"""Security-layer exceptions. Typed, no HTTP."""

from account_api.application.service_result import ErrorCode


class SecurityError(Exception):
    """Base for all security-layer errors. code is the error code clients see."""

    def __init__(self, message: str, code: str = ErrorCode.UNAUTHORIZED) -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidTokenError(SecurityError):
    """Raised when a bearer token is missing, malformed, expired or of the wrong type."""
