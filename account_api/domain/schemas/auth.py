"""Pydantic schemas for the auth API. Request bodies carry no constraints; rules live in the service."""

from typing import Optional

from pydantic import BaseModel, Field

from account_api.domain.models.user import User


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class RegisterRequest(BaseModel):
    """Registration body. Validation happens in UserService so failures come back as VALIDATION_ERROR."""

    nickname: str
    email: str
    password: str
    long_id: Optional[str] = Field(None, alias="longId")

    model_config = {"populate_by_name": True}


class LoginRequest(BaseModel):
    email: str
    password: str


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class TokenResponse(BaseModel):
    access_token: str = Field(..., serialization_alias="accessToken")
    refresh_token: str = Field(..., serialization_alias="refreshToken")

    model_config = {"populate_by_name": True}


class UserResponse(BaseModel):
    """Public view of a user. No credentials."""

    uuid: str
    nickname: str
    email: str
    avatar: Optional[str] = None
    long_id: Optional[str] = Field(None, serialization_alias="longId")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            uuid=str(user.id),
            nickname=user.nickname,
            email=user.email,
            avatar=user.avatar,
            long_id=user.long_id,
        )
