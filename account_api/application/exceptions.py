"""Application-layer exceptions. Do not reuse domain exceptions."""


class ApplicationError(Exception):
    """Base for all application-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConflictError(ApplicationError):
    """Raised when stored state conflicts with the requested change (e.g. a unique key raced)."""
