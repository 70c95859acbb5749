import time

from PySide6.QtCore import QTimer


class Throttle:
    """Call `func` at most once per `interval_ms`, on the leading and trailing edge.

    Calls arriving inside the interval are coalesced: only the most recent
    arguments are kept and delivered once the interval has elapsed.
    """

    def __init__(self, func, interval_ms: int):
        self._func = func
        self._interval_ms = max(0, int(interval_ms))
        self._last_call = None
        self._pending_args = None
        self._trailing_scheduled = False
        self._generation = 0

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    def __call__(self, *args):
        now = time.monotonic()
        elapsed_ms = None if self._last_call is None else (now - self._last_call) * 1000
        # A negative gap means the clock went backwards; treat the interval as over.
        if elapsed_ms is None or elapsed_ms < 0 or elapsed_ms >= self._interval_ms:
            self._last_call = now
            self._pending_args = None
            self._func(*args)
            return

        self._pending_args = args
        if not self._trailing_scheduled:
            self._trailing_scheduled = True
            generation = self._generation
            delay = max(0, int(round(self._interval_ms - elapsed_ms)))
            QTimer.singleShot(delay, lambda: self._fire_trailing(generation))

    def _fire_trailing(self, generation: int):
        if generation != self._generation:
            return
        self._trailing_scheduled = False
        if self._pending_args is None:
            return
        args = self._pending_args
        self._pending_args = None
        self._last_call = time.monotonic()
        self._func(*args)

    def cancel(self):
        """Drop any pending trailing call."""
        self._generation += 1
        self._pending_args = None
        self._trailing_scheduled = False
        self._last_call = None
