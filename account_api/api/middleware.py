"""API middleware: correlation ID, access log, rate limiting."""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from account_api.api.responses import error_response
from account_api.application.service_result import ErrorCode
from account_api.core.context import correlation_id_ctx
from account_api.scalability.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
RETRY_AFTER_HEADER = "Retry-After"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Generate or preserve correlation ID; attach to request.state, response header, and logging context."""

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        correlation_id_ctx.set(correlation_id)

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """After response: one structured log line per call (method, path, status_code, duration_ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "request_completed",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject clients over the limit with 429 and an ErrorResponse body. Exempt paths are never counted."""

    def __init__(self, app, limiter: RateLimiter, exempt_paths: tuple[str, ...] = ("/health",)) -> None:
        super().__init__(app)
        self._limiter = limiter
        self._exempt = exempt_paths

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in self._exempt:
            return await call_next(request)

        client_id = request.client.host if request.client else "anonymous"
        if not await self._limiter.allow_request(client_id):
            logger.warning("rate_limited", extra={"client_id": client_id, "path": request.url.path})
            response = error_response(429, ErrorCode.RATE_LIMITED, "Too many requests")
            response.headers[RETRY_AFTER_HEADER] = str(self._limiter.window_seconds)
            return response
        return await call_next(request)
