"""Scalability: request rate limiting."""

from account_api.scalability.rate_limiter import (
    InMemoryRateLimitBackend,
    RateLimitBackend,
    RateLimiter,
)

__all__ = [
    "InMemoryRateLimitBackend",
    "RateLimitBackend",
    "RateLimiter",
]
