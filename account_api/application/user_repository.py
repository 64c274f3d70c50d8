"""User repository protocol. Application layer depends on this; infrastructure implements it."""

from typing import Optional, Protocol
from uuid import UUID

from account_api.domain.models.user import User


class UserRepository(Protocol):
    """Protocol for persisting and retrieving users. DB is the source of truth."""

    async def find_by_email(self, email: str) -> Optional[User]:
        ...

    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        ...

    async def create(
        self,
        nickname: str,
        email: str,
        password_hash: str,
        long_id: Optional[str] = None,
    ) -> User:
        """Persist a new user and return it with its generated id. Raises ConflictError on duplicate email."""
        ...
