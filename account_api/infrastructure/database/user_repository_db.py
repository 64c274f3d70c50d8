"""DB-backed user repository. Persists users to the users table."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from account_api.application.exceptions import ConflictError
from account_api.domain.models.user import User
from account_api.infrastructure.database.models import UserRecord


def _to_domain(orm: UserRecord) -> User:
    created_at = orm.created_at or datetime.now(timezone.utc)
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return User(
        id=orm.id,
        nickname=orm.nickname,
        email=orm.email,
        password_hash=orm.password_hash,
        created_at=created_at,
        avatar=orm.avatar,
        long_id=orm.long_id,
    )


class DbUserRepository:
    """Implements the UserRepository protocol on an AsyncSession. Soft-deleted rows are invisible."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_email(self, email: str) -> Optional[User]:
        return await self._find_one(UserRecord.email == email)

    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        return await self._find_one(UserRecord.id == user_id)

    async def create(
        self,
        nickname: str,
        email: str,
        password_hash: str,
        long_id: Optional[str] = None,
    ) -> User:
        """Insert and commit. A concurrent insert of the same email raises ConflictError."""
        orm = UserRecord(
            nickname=nickname,
            email=email,
            password_hash=password_hash,
            long_id=long_id,
        )
        self._session.add(orm)
        try:
            await self._session.flush()
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise ConflictError(f"User with email {email} already exists") from e
        await self._session.refresh(orm)
        return _to_domain(orm)

    async def _find_one(self, *criteria) -> Optional[User]:
        stmt = select(UserRecord).where(*criteria, UserRecord.is_deleted == False)  # noqa: E712
        result = await self._session.execute(stmt)
        orm = result.scalar_one_or_none()
        if orm is None:
            return None
        return _to_domain(orm)
