"""
Tick scheduling for the Practice Efficiency Tracker.

The tracking engines never sleep or spawn work themselves; they ask a
scheduler for a repeating tick and cancel it when its condition ends.
Two implementations are provided:

* :class:`ManualScheduler` owns a virtual clock and fires ticks only when
  time is advanced explicitly. Tests and embeddings that drive time
  themselves use it.
* :class:`ThreadingScheduler` fires ticks from ``threading.Timer`` threads,
  serialising every callback through a shared lock.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional, Protocol

from ..utils import now_ms

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class TickHandle(Protocol):
    """Handle of a repeating tick."""

    @property
    def active(self) -> bool:
        ...

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Periodic scheduler primitive - supports DIP."""

    def every(self, interval_ms: int, callback: TickCallback) -> TickHandle:
        """Call ``callback`` every ``interval_ms`` until the handle is cancelled."""
        ...


class _ManualTick:
    def __init__(self, interval_ms: int, callback: TickCallback, next_due: int, seq: int):
        self.interval_ms = interval_ms
        self.callback = callback
        self.next_due = next_due
        self.seq = seq
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False


class ManualScheduler:
    """
    Deterministic scheduler driven by a virtual millisecond clock.

    ``now`` can be handed to the engines as their clock so that timestamps
    and ticks share one time line.
    """

    def __init__(self, start_ms: int = 0):
        self._now = int(start_ms)
        self._ticks: List[_ManualTick] = []
        self._seq = 0

    def now(self) -> int:
        return self._now

    def every(self, interval_ms: int, callback: TickCallback) -> _ManualTick:
        if interval_ms <= 0:
            raise ValueError("Tick interval must be positive")
        self._seq += 1
        tick = _ManualTick(interval_ms, callback, self._now + interval_ms, self._seq)
        self._ticks.append(tick)
        return tick

    @property
    def active_ticks(self) -> int:
        return sum(1 for tick in self._ticks if tick.active)

    def advance(self, ms: int) -> None:
        """
        Move the clock forward, firing every tick that falls due on the way.

        Ticks fire in due-time order; a tick cancelled by an earlier callback
        does not fire.
        """
        target = self._now + max(0, int(ms))
        while True:
            self._ticks = [tick for tick in self._ticks if tick.active]
            due = self._next_due(target)
            if due is None:
                break
            self._now = due.next_due
            due.next_due += due.interval_ms
            due.callback()
        self._now = target

    def _next_due(self, target: int) -> Optional[_ManualTick]:
        candidates = [t for t in self._ticks if t.active and t.next_due <= target]
        if not candidates:
            return None
        return min(candidates, key=lambda t: (t.next_due, t.seq))


class _ThreadTick:
    def __init__(self, interval_ms: int, callback: TickCallback, lock):
        self._interval = interval_ms / 1000.0
        self._callback = callback
        self._lock = lock
        self._active = True
        self._timer: Optional[threading.Timer] = None
        self._schedule()

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False
        if self._timer is not None:
            self._timer.cancel()

    def _schedule(self) -> None:
        self._timer = threading.Timer(self._interval, self._run)
        self._timer.daemon = True
        self._timer.start()

    def _run(self) -> None:
        with self._lock:
            # Re-check under the lock: a request may have cancelled us meanwhile
            if not self._active:
                return
            try:
                self._callback()
            except Exception:
                logger.exception("Tick callback failed; cancelling tick")
                self._active = False
                return
        if self._active:
            self._schedule()


class ThreadingScheduler:
    """Wall-clock scheduler; callbacks run while holding ``lock``."""

    def __init__(self, lock=None):
        self.lock = lock if lock is not None else threading.RLock()

    @staticmethod
    def now() -> int:
        return now_ms()

    def every(self, interval_ms: int, callback: TickCallback) -> _ThreadTick:
        if interval_ms <= 0:
            raise ValueError("Tick interval must be positive")
        return _ThreadTick(interval_ms, callback, self.lock)
