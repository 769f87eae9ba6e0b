"""In-memory fixed-window blocking rate limiter.

Notes:
- Per-process only: each process enforces its own limit.
- Thread-safe: all state lives behind a single condition variable.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from crpt_api.adapters.rate_limit.base import (
    AbstractRateLimiter,
    CancellationToken,
    RateLimitPermit,
    TimeUnit,
)
from crpt_api.core.errors import (
    CancellationAppError,
    ClosedAppError,
    ConfigurationAppError,
)

logger = logging.getLogger(__name__)


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Admit at most ``limit`` permits per window, blocking the excess.

    The window is anchored at the first admission after the previous window
    expired: when ``now`` reaches ``window_start + window_seconds`` the counter
    resets and ``window_start`` moves to ``now``. Callers that find the window
    exhausted wait on a condition variable until it rolls over.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the limiter.

        Args:
            limit: Maximum number of permits per window.
            window_seconds: Window length in seconds.
            clock: Monotonic time source returning seconds.

        Raises:
            ConfigurationAppError: If limit or window_seconds are not positive.
        """
        if limit < 1:
            raise ConfigurationAppError(
                code="rate_limit_invalid_limit",
                message="request limit must be >= 1",
                details={"limit": limit},
            )
        if window_seconds <= 0:
            raise ConfigurationAppError(
                code="rate_limit_invalid_window",
                message="window_seconds must be > 0",
                details={"window_seconds": window_seconds},
            )

        self._limit = limit
        self._window_seconds = float(window_seconds)
        self._clock = clock
        self._cond = threading.Condition(threading.RLock())
        self._window_start: float | None = None
        self._count = 0
        self._closed = False

    @classmethod
    def for_time_unit(
        cls,
        time_unit: TimeUnit,
        limit: int,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> "InMemoryFixedWindowRateLimiter":
        """Build a limiter whose window is one ``time_unit`` long.

        Raises:
            ConfigurationAppError: If the unit is unknown or the limit is invalid.
        """
        try:
            unit = TimeUnit(time_unit)
        except ValueError as exc:
            raise ConfigurationAppError(
                code="rate_limit_invalid_time_unit",
                message=f"Unknown time unit: {time_unit!r}",
                details={"hint": ", ".join(member.value for member in TimeUnit)},
            ) from exc
        return cls(limit=limit, window_seconds=unit.seconds, clock=clock)

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    @property
    def is_closed(self) -> bool:
        with self._cond:
            return self._closed

    def _roll_window(self, now: float) -> float:
        """Start a new window when the current one has expired.

        Returns:
            Start of the window that ``now`` falls in.
        """
        window_start = self._window_start
        if window_start is None or now >= window_start + self._window_seconds:
            window_start = now
            self._window_start = now
            self._count = 0
        return window_start

    def _raise_closed(self) -> None:
        raise ClosedAppError(
            code="rate_limiter_closed",
            message="Rate limiter has been shut down",
        )

    def _wake_waiters(self) -> None:
        with self._cond:
            self._cond.notify_all()

    def acquire(self, *, cancel: CancellationToken | None = None) -> RateLimitPermit:
        """Block until a permit is available in the current window, then take it.

        Args:
            cancel: Optional token; cancelling it wakes this caller, which then
                raises without consuming a permit.

        Returns:
            RateLimitPermit with window metadata.

        Raises:
            ClosedAppError: If the limiter is (or becomes) shut down.
            CancellationAppError: If ``cancel`` fires before admission.
        """
        started = self._clock()

        if cancel is not None:
            cancel.add_callback(self._wake_waiters)
        try:
            with self._cond:
                while True:
                    if self._closed:
                        self._raise_closed()
                    if cancel is not None and cancel.cancelled:
                        raise CancellationAppError(
                            code="rate_limit_wait_cancelled",
                            message="Cancelled while waiting for a rate limit permit",
                            details={"limit": self._limit},
                        )

                    now = self._clock()
                    window_start = self._roll_window(now)
                    reset_at = window_start + self._window_seconds

                    if self._count < self._limit:
                        self._count += 1
                        return RateLimitPermit(
                            limit=self._limit,
                            remaining=self._limit - self._count,
                            window_start=window_start,
                            reset_at=reset_at,
                            waited_seconds=max(0.0, now - started),
                        )

                    wait_for = reset_at - now
                    logger.debug(
                        "rate_limit.wait",
                        extra={"limit": self._limit, "wait_s": round(wait_for, 3)},
                    )
                    self._cond.wait(timeout=wait_for)
        finally:
            if cancel is not None:
                cancel.remove_callback(self._wake_waiters)

    def shutdown(self) -> None:
        """Close the limiter and wake every waiter so it fails with ClosedAppError."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._cond.notify_all()
        logger.info("rate_limit.shutdown", extra={"limit": self._limit})
