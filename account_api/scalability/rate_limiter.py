"""Per-client sliding-window rate limiter with pluggable backend."""

import threading
import time
from typing import Any, Callable, Protocol


class RateLimitBackend(Protocol):
    """Backend for rate limit state (in-memory, or Redis via RedisClient). Injected."""

    async def incr_window(self, key: str, window_seconds: int) -> int: ...


class InMemoryRateLimitBackend:
    """In-memory sliding window: key -> list of timestamps. For tests or single-node."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._windows: dict[str, list[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    @property
    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._windows)

    async def incr_window(self, key: str, window_seconds: int) -> int:
        now = self._clock()
        cutoff = now - window_seconds
        with self._lock:
            if now - self._last_sweep >= window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now
            hits = [t for t in self._windows.get(key, []) if t > cutoff]
            hits.append(now)
            self._windows[key] = hits
            return len(hits)

    def _sweep(self, cutoff: float) -> None:
        """Drop clients with no hit inside the window. Caller holds the lock."""
        stale = [k for k, hits in self._windows.items() if not hits or hits[-1] <= cutoff]
        for k in stale:
            del self._windows[k]


class RateLimiter:
    """
    Allows at most requests_per_window hits per client key in any window_seconds span.
    Optional metrics callback is told about rejected requests.
    """

    def __init__(
        self,
        backend: RateLimitBackend,
        requests_per_window: int = 1000,
        window_seconds: int = 1,
        metrics_callback: Any = None,
    ) -> None:
        self._backend = backend
        self._limit = requests_per_window
        self._window = window_seconds
        self._metrics = metrics_callback
        self._key_prefix = "rate:client:"

    @property
    def window_seconds(self) -> int:
        return self._window

    def _key(self, client_id: str) -> str:
        return f"{self._key_prefix}{client_id}"

    async def allow_request(self, client_id: str) -> bool:
        """Record a hit for client_id and return True if it is within the limit."""
        count = await self._backend.incr_window(self._key(client_id), self._window)
        allowed = count <= self._limit
        if self._metrics and not allowed:
            self._metrics("rate_limit_exceeded", client_id=client_id)
        return allowed
