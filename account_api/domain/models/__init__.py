"""Domain models. Pure business entities."""

from account_api.domain.models.user import User

__all__ = ["User"]
