"""Domain model for user accounts. Pure business semantics, no ORM or infrastructure."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class User:
    """
    Registered account. Identity is the UUID; email is unique across accounts.
    password_hash is a bcrypt hash and never leaves the service layer.
    """

    id: UUID
    nickname: str
    email: str
    password_hash: str
    created_at: datetime
    avatar: Optional[str] = None
    long_id: Optional[str] = None
