"""Auth API router: register, login, current user, token refresh."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends

from account_api.api.dependencies import (
    get_user_service,
    require_access_user,
    require_refresh_user,
)
from account_api.api.responses import respond_result
from account_api.application.user_service import UserService
from account_api.domain.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from account_api.domain.schemas.error import ErrorResponse

router = APIRouter()

_ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
}


@router.post(
    "/register",
    status_code=201,
    response_model=UserResponse,
    responses={**_ERRORS, 409: {"model": ErrorResponse}},
)
async def register(
    body: RegisterRequest,
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Create an account. 201 with the new user, 400 on validation failure, 409 if the email is taken."""
    return respond_result(await user_service.register(body), success_status=201)


@router.post("/login", response_model=TokenResponse, responses=_ERRORS)
async def login(
    body: LoginRequest,
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Exchange email and password for an access/refresh token pair."""
    return respond_result(await user_service.login(body))


@router.get("/me", response_model=UserResponse, responses={**_ERRORS, 404: {"model": ErrorResponse}})
async def me(
    user_id: Annotated[UUID, Depends(require_access_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    return respond_result(await user_service.get_current_user(user_id))


@router.post("/refresh", response_model=TokenResponse, responses=_ERRORS)
async def refresh(
    user_id: Annotated[UUID, Depends(require_refresh_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """New token pair for the holder of a refresh token."""
    return respond_result(await user_service.refresh_token(user_id))
