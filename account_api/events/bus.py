"""
In-process event bus: fire-and-forget or wait-for-completion dispatch of domain events.

Async dispatch runs on a fixed pool of worker threads, separate from the
request-handling event loop; every worker runs the event coroutine on its own
loop, so a cancelled request never cancels a reaction it already published.
A handler that raises is logged with the event kind and swallowed. There is
no retry, no ordering across publishes and no backpressure.
"""

import asyncio
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional, Protocol, Set

logger = logging.getLogger(__name__)

DEFAULT_WORKER_COUNT = 1


class HandleableEvent(Protocol):
    """Anything the bus can dispatch: a kind discriminator and an async reaction."""

    kind: str

    async def handle(self) -> None:
        ...


FailureHook = Callable[[HandleableEvent, BaseException], None]


def event_kind(event: HandleableEvent) -> str:
    return getattr(event, "kind", None) or type(event).__name__


class EventBus:
    """
    Dispatches events to their handle() coroutine.

    Starts with a single-worker pool so publishing before init() is well defined.
    init() replaces the pool wholesale; it is meant to run once at startup,
    before traffic, and is not synchronized against concurrent publish() calls.
    """

    def __init__(
        self,
        worker_count: int = DEFAULT_WORKER_COUNT,
        on_failure: Optional[FailureHook] = None,
    ) -> None:
        _check_worker_count(worker_count)
        self._worker_count = worker_count
        self._executor = _new_executor(worker_count)
        self._on_failure = on_failure
        self._pending: Set[Future] = set()
        self._pending_lock = threading.Lock()

    @property
    def worker_count(self) -> int:
        return self._worker_count

    @property
    def pending(self) -> int:
        """Number of async dispatches submitted and not yet finished."""
        with self._pending_lock:
            return len(self._pending)

    def init(self, worker_count: int) -> None:
        """
        Swap in a pool of worker_count threads. The previous pool is shut down
        without waiting; dispatches already queued on it still run and drain() still waits for them.
        """
        _check_worker_count(worker_count)
        previous = self._executor
        self._executor = _new_executor(worker_count)
        self._worker_count = worker_count
        previous.shutdown(wait=False)
        logger.info("event_bus_initialized", extra={"worker_count": worker_count})

    def set_failure_hook(self, hook: Optional[FailureHook]) -> None:
        """Called as hook(event, exc) after a handler failure has been logged."""
        self._on_failure = hook

    async def publish(self, event: HandleableEvent, is_async: bool = True) -> None:
        """
        Dispatch event. With is_async the call returns once the event is queued;
        otherwise it returns after handle() has finished. Never raises for handler failures.
        """
        if is_async:
            self._submit(event)
            return
        try:
            await event.handle()
        except Exception as exc:
            self._report_failure(event, exc, dispatch="sync")

    async def drain(self) -> None:
        """Wait for every async dispatch submitted so far."""
        with self._pending_lock:
            futures = list(self._pending)
        if futures:
            await asyncio.gather(
                *(asyncio.wrap_future(f) for f in futures),
                return_exceptions=True,
            )

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _submit(self, event: HandleableEvent) -> None:
        future = self._executor.submit(self._run_in_worker, event)
        with self._pending_lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)

    def _forget(self, future: Future) -> None:
        with self._pending_lock:
            self._pending.discard(future)

    def _run_in_worker(self, event: HandleableEvent) -> None:
        try:
            asyncio.run(event.handle())
        except Exception as exc:
            self._report_failure(event, exc, dispatch="async")

    def _report_failure(self, event: HandleableEvent, exc: Exception, dispatch: str) -> None:
        kind = event_kind(event)
        logger.error(
            "event_handler_failed",
            exc_info=exc,
            extra={"event_kind": kind, "dispatch": dispatch},
        )
        hook = self._on_failure
        if hook is None:
            return
        try:
            hook(event, exc)
        except Exception:
            logger.exception("event_failure_hook_failed", extra={"event_kind": kind})


def _check_worker_count(worker_count: int) -> None:
    if worker_count < 1:
        raise ValueError(f"worker_count must be a positive integer, got {worker_count}")


def _new_executor(worker_count: int) -> ThreadPoolExecutor:
    return ThreadPoolExecutor(max_workers=worker_count, thread_name_prefix="event-bus")


# Process-wide instance, wired through api.dependencies.get_event_bus.
event_bus = EventBus()
