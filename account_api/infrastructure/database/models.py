# account_api/infrastructure/database/models.py

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, Uuid
from sqlalchemy.sql import func

from account_api.infrastructure.database.session import Base


class BaseModel(Base):
    __abstract__ = True

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    is_deleted = Column(Boolean, default=False, nullable=False)


class UserRecord(BaseModel):
    """ORM model for registered users."""

    __tablename__ = "users"

    nickname = Column(String(50), nullable=False, index=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    avatar = Column(String, nullable=True)
    long_id = Column(String(50), nullable=True)
