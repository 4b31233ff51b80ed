"""Tick sources that drive an emission session.

Two modes share one schedule. A periodic source (``duration_ms is None``)
delivers ``start_ms + k * interval_ms`` for k = 0, 1, 2, ... until cancelled. A
duration-bounded source walks the same linear clock but delivers the eased
position ``easing(t / duration) * duration`` and completes once ``t`` reaches the
duration.

Ticks never overlap: each one runs under the source's lock, and ``cancel``
takes the same lock, so once it returns no tick is running or will run.
"""

from __future__ import annotations

from typing import Callable
import logging
import threading
import time

from .easing import Easing, linear

logger = logging.getLogger(__name__)

TickCallback = Callable[[int], None]
CompleteCallback = Callable[[], None]


class TickSource:
    """Schedule and serialization shared by the concrete sources."""

    def __init__(
        self,
        interval_ms: int,
        duration_ms: int | None = None,
        easing: Easing = linear,
        start_ms: int = 0,
    ) -> None:
        self.interval_ms = max(1, interval_ms)
        self.duration_ms = duration_ms
        self.easing = easing
        self.clock_ms = start_ms
        self.running = False
        self._callback: TickCallback | None = None
        self._on_complete: CompleteCallback | None = None
        self.lock = threading.RLock()

    @property
    def bounded(self) -> bool:
        """Return whether the source stops on its own after ``duration_ms``."""
        return self.duration_ms is not None

    def start(self, callback: TickCallback, on_complete: CompleteCallback | None = None) -> None:
        """Begin delivering ticks to ``callback``."""
        with self.lock:
            self._callback = callback
            self._on_complete = on_complete
            self.running = True

    def cancel(self) -> None:
        """Stop delivering ticks; returns only after any in-flight tick finished."""
        with self.lock:
            self.running = False

    def fire(self) -> bool:
        """Deliver the next scheduled tick; return False once the source is finished."""
        with self.lock:
            if not self.running or self._callback is None:
                return False
            if not self.bounded:
                value = self.clock_ms
                self.clock_ms += self.interval_ms
                self._callback(value)
                return self.running

            duration = self.duration_ms
            fraction = 1.0 if duration <= 0 else min(1.0, self.clock_ms / duration)
            self._callback(int(round(self.easing(fraction) * duration)))
            if not self.running:
                return False
            if fraction >= 1.0:
                self.running = False
                if self._on_complete is not None:
                    self._on_complete()
                return False
            self.clock_ms += self.interval_ms
            return True


class SteppedTickSource(TickSource):
    """Driven by a host loop, e.g. with the delta from ``pygame.time.Clock.tick``.

    The first tick is due immediately after ``start``; a large delta fires every
    tick that became due, in order.
    """

    def __init__(
        self,
        interval_ms: int,
        duration_ms: int | None = None,
        easing: Easing = linear,
        start_ms: int = 0,
    ) -> None:
        super().__init__(interval_ms, duration_ms, easing, start_ms)
        self.elapsed_ms = 0.0
        self.next_due_ms = 0.0

    def advance(self, delta_ms: float) -> int:
        """Move host time forward and fire due ticks; return how many fired."""
        fired = 0
        with self.lock:
            self.elapsed_ms += delta_ms
            while self.running and self.next_due_ms <= self.elapsed_ms:
                self.next_due_ms += self.interval_ms
                fired += 1
                if not self.fire():
                    break
        return fired


class ThreadedTickSource(TickSource):
    """Fires ticks from a background daemon thread at the configured interval.

    A tick that runs long delays the next one rather than overlapping it.
    """

    def __init__(
        self,
        interval_ms: int,
        duration_ms: int | None = None,
        easing: Easing = linear,
        start_ms: int = 0,
    ) -> None:
        super().__init__(interval_ms, duration_ms, easing, start_ms)
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self, callback: TickCallback, on_complete: CompleteCallback | None = None) -> None:
        super().start(callback, on_complete)
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="sparkfield-ticker", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        interval_s = self.interval_ms / 1000.0
        deadline = time.monotonic()
        while not self._stop.is_set():
            if not self.fire():
                break
            deadline += interval_s
            wait = deadline - time.monotonic()
            if wait < 0:
                deadline = time.monotonic()
                wait = 0.0
            if self._stop.wait(wait):
                break
        logger.debug("Tick thread finished")

    def cancel(self) -> None:
        self._stop.set()
        super().cancel()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._thread = None
