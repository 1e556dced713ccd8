import heapq
import itertools
import logging
import time
from typing import Callable, List, Tuple


class TimerHandle:
    """Returned by ``call_later``; ``cancel()`` turns the pending call into a no-op."""

    __slots__ = ('label', 'cancelled')

    def __init__(self, label: str = ''):
        self.label = label
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class BackgroundScheduler:
    """Runs delayed calls as Socket.IO background tasks.

    Works under every Flask-SocketIO async mode because both the task and
    the sleep go through the ``SocketIO`` object.
    """

    def __init__(self, sio, logger=None):
        self._sio = sio
        self._logger = logger or logging.getLogger(__name__)

    def time(self) -> float:
        return time.time()

    def call_later(self, delay: float, callback: Callable, *args, label: str = '') -> TimerHandle:
        handle = TimerHandle(label)

        def _worker():
            self._sio.sleep(max(0.0, delay))
            if handle.cancelled:
                self._logger.debug(f"[timer-cancelled] {handle.label}")
                return
            try:
                callback(*args)
            except Exception:
                self._logger.exception(f"[timer-error] {handle.label}")

        self._sio.start_background_task(_worker)
        return handle


class ManualScheduler:
    """Virtual clock: delayed calls only run when ``advance`` moves time past them."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start
        self._queue: List[Tuple[float, int, TimerHandle, Callable, tuple]] = []
        self._seq = itertools.count()

    def time(self) -> float:
        return self.now

    def call_later(self, delay: float, callback: Callable, *args, label: str = '') -> TimerHandle:
        handle = TimerHandle(label)
        due = self.now + max(0.0, delay)
        heapq.heappush(self._queue, (due, next(self._seq), handle, callback, args))
        return handle

    @property
    def pending(self) -> List[TimerHandle]:
        return [entry[2] for entry in sorted(self._queue) if not entry[2].cancelled]

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due calls in order (including ones they schedule)."""
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback, args = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            if not handle.cancelled:
                callback(*args)
        self.now = target
