"""
Cancellation and deadline signal for a single logical request.

A `RequestContext` can be cancelled from any thread. Sleeps between attempts
wait on it, so cancelling wakes a sleeping retry loop right away, whether the
loop runs in a thread or on an asyncio event loop.
"""

import asyncio
import threading
import time

from ..exceptions import DeadlineExceededError, RequestCancelledError

CONTEXT_EXTENSION = "retry_context"


class RequestContext:
    """Cancellation signal with an optional deadline."""

    def __init__(self, timeout: float | None = None):
        """
        Args:
            timeout: Seconds from now after which the context is done
        """
        self._deadline = None if timeout is None else time.monotonic() + timeout
        self._done = threading.Event()
        self._lock = threading.Lock()
        self._reason: str | None = None
        self._waiters: list[tuple[asyncio.AbstractEventLoop, asyncio.Event]] = []

    @classmethod
    def with_timeout(cls, seconds: float) -> "RequestContext":
        return cls(timeout=seconds)

    @property
    def done(self) -> bool:
        return self.error() is not None

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self, reason: str | None = None) -> None:
        """Cancel the context and wake every sleeper."""
        with self._lock:
            if self._done.is_set():
                return
            self._reason = reason
            self._done.set()
            waiters = list(self._waiters)
        for loop, event in waiters:
            loop.call_soon_threadsafe(event.set)

    def error(self) -> Exception | None:
        """Return the cancellation or deadline error, or None while live."""
        if self._done.is_set():
            if self._reason:
                return RequestCancelledError(f"request cancelled: {self._reason}")
            return RequestCancelledError()
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return DeadlineExceededError()
        return None

    def _bounded(self, seconds: float) -> float:
        remaining = self.remaining()
        if remaining is None:
            return max(0.0, seconds)
        return max(0.0, min(seconds, remaining))

    def _after_timeout(self, seconds: float, timeout: float) -> Exception | None:
        # bounded by the deadline rather than by `seconds`
        if timeout < seconds:
            return self.error() or DeadlineExceededError()
        return self.error()

    def wait(self, seconds: float) -> Exception | None:
        """Block for up to `seconds`; return `error()` afterwards."""
        timeout = self._bounded(seconds)
        if self._done.wait(timeout):
            return self.error()
        return self._after_timeout(seconds, timeout)

    async def async_wait(self, seconds: float) -> Exception | None:
        """Async variant of `wait`."""
        event = asyncio.Event()
        waiter = (asyncio.get_running_loop(), event)
        with self._lock:
            if self._done.is_set():
                return self.error()
            self._waiters.append(waiter)
        timeout = self._bounded(seconds)
        try:
            await asyncio.wait_for(event.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            return self._after_timeout(seconds, timeout)
        finally:
            with self._lock:
                self._waiters.remove(waiter)
        return self.error()
