"""Boundary adapter: turns ServiceResult values and faults into JSON responses."""

from typing import Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from account_api.application.service_result import ServiceResult, Success
from account_api.domain.schemas.error import ErrorResponse


def error_response(
    status_code: int, code: str, message: str, headers: Optional[dict[str, str]] = None
) -> JSONResponse:
    """ErrorResponse body with the timestamp taken now."""
    body = ErrorResponse.now(code=code, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


def respond_result(result: ServiceResult, success_status: int = 200) -> JSONResponse:
    """
    Success -> payload with success_status. Error -> ErrorResponse with the error's status.
    The payload is encoded as-is; its type is never inspected here.
    """
    if isinstance(result, Success):
        return JSONResponse(status_code=success_status, content=jsonable_encoder(result.data))
    return error_response(result.status_code, result.code, result.message)
