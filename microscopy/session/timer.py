"""One-shot, cancellable timer for the splash-screen transition."""

from __future__ import annotations

import threading
from typing import Callable, Optional, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]


def thread_scheduler(delay: float, callback: Callable[[], None]) -> TimerHandle:
    """Default scheduler: a daemon ``threading.Timer``."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


class OneShotTimer:
    """Fires ``callback`` once after ``delay`` seconds unless cancelled.

    Cancelling is idempotent, and a callback that races past cancel() is
    dropped.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[], None],
        scheduler: Scheduler = thread_scheduler,
    ):
        self._callback = callback
        self._lock = threading.Lock()
        self._cancelled = False
        self._fired = False
        self._handle: Optional[TimerHandle] = scheduler(max(0.0, delay), self._fire)

    @property
    def pending(self) -> bool:
        with self._lock:
            return not (self._cancelled or self._fired)

    def cancel(self) -> None:
        with self._lock:
            if self._cancelled or self._fired:
                return
            self._cancelled = True
            handle, self._handle = self._handle, None
        if handle is not None:
            handle.cancel()

    def _fire(self) -> None:
        with self._lock:
            if self._cancelled or self._fired:
                return
            self._fired = True
        self._callback()
