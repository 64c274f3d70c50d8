# account_api/main.py

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from account_api.api import dependencies
from account_api.api.middleware import (
    AccessLogMiddleware,
    CorrelationIdMiddleware,
    RateLimitMiddleware,
)
from account_api.api.responses import error_response
from account_api.api.routers import auth, health
from account_api.application.exceptions import ConflictError
from account_api.application.service_result import ErrorCode
from account_api.config.logging import configure_logging
from account_api.config.settings import AppSettings, get_settings
from account_api.domain.exceptions import DomainValidationError
from account_api.scalability.rate_limiter import InMemoryRateLimitBackend, RateLimiter
from account_api.security.exceptions import SecurityError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: AppSettings = app.state.settings
    bus = dependencies.get_event_bus()
    bus.init(settings.event_bus_workers)
    yield
    await bus.drain()


def _install_exception_handlers(app: FastAPI, settings: AppSettings) -> None:
    """Global fault mapper. Every branch logs the real cause and answers with an ErrorResponse body."""

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request, exc: RequestValidationError):
        logger.warning("request_validation_failed", extra={"errors": str(exc.errors())})
        return error_response(400, ErrorCode.VALIDATION_ERROR, "Request body is invalid")

    @app.exception_handler(DomainValidationError)
    async def domain_validation_error_handler(request, exc: DomainValidationError):
        logger.warning("domain_validation_failed", extra={"error": exc.message})
        return error_response(400, ErrorCode.VALIDATION_ERROR, exc.message)

    @app.exception_handler(ValidationError)
    async def model_validation_error_handler(request, exc: ValidationError):
        # Request bodies arrive as RequestValidationError; this one comes from server-side data.
        logger.error("model_validation_failed", exc_info=exc)
        return error_response(500, ErrorCode.INTERNAL_ERROR, "An internal error occurred")

    @app.exception_handler(ValueError)
    async def value_error_handler(request, exc: ValueError):
        logger.warning("invalid_argument", exc_info=exc)
        return error_response(400, ErrorCode.VALIDATION_ERROR, "Invalid argument")

    @app.exception_handler(ConflictError)
    async def conflict_error_handler(request, exc: ConflictError):
        logger.warning("state_conflict", exc_info=exc)
        return error_response(409, ErrorCode.CONFLICT, exc.message or "Operation conflict")

    @app.exception_handler(SecurityError)
    async def security_error_handler(request, exc: SecurityError):
        logger.warning("unauthorized", extra={"error": exc.message, "code": exc.code})
        return error_response(
            401,
            exc.code,
            exc.message or "Unauthorized access",
            headers={"WWW-Authenticate": f'Bearer realm="{settings.jwt_realm}"'},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc: StarletteHTTPException):
        return error_response(exc.status_code, f"HTTP_{exc.status_code}", str(exc.detail))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request, exc: Exception):
        logger.error("unhandled_exception", exc_info=exc)
        return error_response(500, ErrorCode.INTERNAL_ERROR, "An internal error occurred")


def _rate_limiter(settings: AppSettings) -> RateLimiter:
    if settings.rate_limit_backend == "redis":
        backend = dependencies.get_redis_client()
    else:
        backend = InMemoryRateLimitBackend()
    return RateLimiter(
        backend=backend,
        requests_per_window=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Middleware order: last added runs first (outermost).
    # Request flow: CORS -> CorrelationId -> AccessLog -> RateLimit.
    if settings.rate_limit_enabled:
        app.add_middleware(RateLimitMiddleware, limiter=_rate_limiter(settings))
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(CorrelationIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _install_exception_handlers(app, settings)

    # Routers: /health, /auth
    app.include_router(health.router)
    app.include_router(auth.router, prefix="/auth")
    return app


app = create_app()
