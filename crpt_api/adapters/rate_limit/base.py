"""Rate limiter interfaces.

The client depends on this abstraction (not the concrete implementation)
so the storage backend can be swapped later with minimal changes.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable


class TimeUnit(str, Enum):
    """Unit used to express the length of a rate limit window."""

    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"

    @classmethod
    def _missing_(cls, value: object) -> "TimeUnit | None":
        # Accept "SECONDS", "Minutes", etc. from env/CLI input
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None

    @property
    def seconds(self) -> float:
        """Length of one unit in seconds."""
        return _UNIT_SECONDS[self]


_UNIT_SECONDS = {
    TimeUnit.SECONDS: 1.0,
    TimeUnit.MINUTES: 60.0,
    TimeUnit.HOURS: 3600.0,
    TimeUnit.DAYS: 86400.0,
}


@dataclass(frozen=True)
class RateLimitPermit:
    """A granted permit.

    Attributes:
        limit: Max permits per window.
        remaining: Permits left in the current window after this one.
        window_start: Clock value at which the current window started.
        reset_at: Clock value at which the current window ends.
        waited_seconds: How long the caller was blocked before admission.
    """

    limit: int
    remaining: int
    window_start: float
    reset_at: float
    waited_seconds: float


class CancellationToken:
    """Thread-safe cancellation signal for callers blocked on a limiter.

    Limiters register a wake-up callback while a caller waits; ``cancel()``
    sets the flag and invokes those callbacks so the waiter returns promptly.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Cancel the token and wake any registered waiters."""
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks = list(self._callbacks)
        for callback in callbacks:
            callback()

    def add_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                pass


class AbstractRateLimiter(ABC):
    """Interface for blocking rate limiters."""

    @abstractmethod
    def acquire(self, *, cancel: CancellationToken | None = None) -> RateLimitPermit:
        """Block until a permit is available, then consume it.

        Args:
            cancel: Optional token; cancelling it aborts the wait.

        Returns:
            RateLimitPermit describing the granted permit.

        Raises:
            CancellationAppError: If cancelled while waiting.
            ClosedAppError: If the limiter has been shut down.
        """
        raise NotImplementedError

    @abstractmethod
    def shutdown(self) -> None:
        """Release resources and fail any current or future waiters."""
        raise NotImplementedError

    @property
    @abstractmethod
    def is_closed(self) -> bool:
        """Whether shutdown() has been called."""
        raise NotImplementedError
