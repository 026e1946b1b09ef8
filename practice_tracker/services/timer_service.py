"""Timer service for the Practice Efficiency Tracker application."""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ..models import ActionKind, Drill, Session, TimeSegment, TimerRecord
from ..utils import TIMER_TICK_MS, now_ms
from .scheduler import Scheduler, TickHandle

logger = logging.getLogger(__name__)

EVENT_START = "start"
EVENT_PAUSE = "pause"
EVENT_STOP = "stop"
EVENT_RESET = "reset"


@dataclass
class TimerState:
    """Live state of one timer action while its drill is open."""

    total_time: int = 0
    time_segments: List[TimeSegment] = field(default_factory=list)
    start_time: Optional[int] = None
    elapsed_time: int = 0

    @property
    def is_running(self) -> bool:
        return self.start_time is not None

    @classmethod
    def from_record(cls, record: Optional[TimerRecord]) -> "TimerState":
        if record is None:
            return cls()
        resumed = record.copy()
        return cls(total_time=resumed.total_time, time_segments=resumed.time_segments)

    def to_record(self) -> TimerRecord:
        return TimerRecord(total_time=self.total_time, time_segments=list(self.time_segments)).copy()


@dataclass
class TimerEvent:
    """Notification emitted on every timer transition."""

    kind: str
    action_id: str
    timestamp: int


TimerListener = Callable[[TimerEvent], None]


class TimerService:
    """
    Single-active-timer state machine for the drill currently open.

    Each enabled timer action of the loaded drill is either Idle or Running.
    Starting a timer first stops whichever other timer is running, so at
    most one segment is ever open. Closed segments are committed into the
    drill on every pause/stop; an open segment is never committed.
    """

    def __init__(
        self,
        session: Session,
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Callable[[], int]] = None,
        tick_ms: int = TIMER_TICK_MS,
    ):
        self.session = session
        self._scheduler = scheduler
        self._clock = clock
        self._tick_ms = tick_ms
        self._tick: Optional[TickHandle] = None
        self._drill_index: Optional[int] = None
        self._listeners: List[TimerListener] = []
        self.timers: Dict[str, TimerState] = {}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def loaded(self) -> bool:
        return self._drill_index is not None

    @property
    def drill_index(self) -> Optional[int]:
        return self._drill_index

    @property
    def current_timer(self) -> Optional[str]:
        return self.session.active_timer_action_id

    def add_listener(self, listener: TimerListener) -> None:
        self._listeners.append(listener)

    def load(self, drill_index: int) -> bool:
        """Rebuild live timers for a drill from its committed records."""

        if self.loaded:
            self.unload()
        if not self.session.has_drill(drill_index):
            logger.debug("Ignoring timer load for unknown drill index %s", drill_index)
            return False

        drill = self.session.drills[drill_index]
        self.timers = {
            action.id: TimerState.from_record(drill.record_for(action.id))
            for action in drill.enabled_actions(ActionKind.TIMER)
        }
        self.session.active_timer_action_id = None
        self._drill_index = drill_index
        return True

    def unload(self) -> None:
        """Close any open segment, commit every timer and detach from the drill."""

        if not self.loaded:
            return
        self.stop_active()
        self.commit()
        self._cancel_tick()
        self.timers = {}
        self.session.active_timer_action_id = None
        self._drill_index = None

    def commit(self, action_id: Optional[str] = None) -> None:
        """Copy idle timer state into the loaded drill's ``timer_data``."""

        drill = self._drill()
        if drill is None:
            return
        ids = [action_id] if action_id is not None else list(self.timers)
        for timer_id in ids:
            state = self.timers.get(timer_id)
            if state is None or state.is_running:
                continue
            if state.time_segments or timer_id in drill.timer_data:
                drill.timer_data[timer_id] = state.to_record()

    # ------------------------------------------------------------------
    # Core timer controls
    # ------------------------------------------------------------------
    def start(self, action_id: str) -> bool:
        """Open a new segment for ``action_id``, stopping any other running timer first."""

        state = self._accepted_state(action_id, "start")
        if state is None or state.is_running:
            return False

        self._preempt_running(action_id)

        now = self._now()
        state.time_segments.append(TimeSegment(start_time=now))
        state.start_time = now
        state.elapsed_time = 0
        self.session.active_timer_action_id = action_id
        self._start_tick()
        self._emit(EVENT_START, action_id, now)
        return True

    def pause(self, action_id: str) -> bool:
        """Close the open segment of a running timer."""
        return self._close(action_id, EVENT_PAUSE)

    def stop(self, action_id: str) -> bool:
        """Same effect as :meth:`pause`; used for cross-timer exclusivity."""
        return self._close(action_id, EVENT_STOP)

    def stop_active(self) -> Optional[str]:
        """Stop the running timer, if any, and return its id."""

        running = self.session.active_timer_action_id
        if running is not None and self.stop(running):
            return running
        return None

    def reset(self, action_id: str) -> bool:
        """Discard all segments of an idle timer."""

        state = self._accepted_state(action_id, "reset")
        if state is None or state.is_running:
            return False

        self.timers[action_id] = TimerState()
        self.commit(action_id)
        self._emit(EVENT_RESET, action_id, self._now())
        return True

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------
    def is_running(self, action_id: str) -> bool:
        state = self.timers.get(action_id)
        return state is not None and state.is_running

    def elapsed_ms(self, action_id: str) -> int:
        """Milliseconds since the running segment opened, 0 when idle."""

        state = self.timers.get(action_id)
        if state is None or not state.is_running:
            return 0
        return max(0, self._now() - state.start_time)

    def display_total_ms(self, action_id: str) -> int:
        state = self.timers.get(action_id)
        if state is None:
            return 0
        return state.total_time + self.elapsed_ms(action_id)

    def live_state(self) -> Dict[str, dict]:
        return {
            action_id: {
                "is_running": state.is_running,
                "start_time": state.start_time,
                "elapsed_time": self.elapsed_ms(action_id),
                "total_time": state.total_time,
                "time_segments": [segment.to_dict() for segment in state.time_segments],
            }
            for action_id, state in self.timers.items()
        }

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _now(self) -> int:
        return int(self._clock()) if self._clock is not None else now_ms()

    def _drill(self) -> Optional[Drill]:
        if self._drill_index is None or not self.session.has_drill(self._drill_index):
            return None
        return self.session.drills[self._drill_index]

    def _accepted_state(self, action_id: str, command: str) -> Optional[TimerState]:
        drill = self._drill()
        if drill is None or not drill.is_enabled(action_id, ActionKind.TIMER):
            logger.debug("Ignoring timer %s for unavailable action %r", command, action_id)
            return None
        return self.timers.get(action_id)

    def _preempt_running(self, action_id: str) -> None:
        running = self.session.active_timer_action_id
        if running is not None and running != action_id:
            logger.debug("Stopping %s before starting %s", running, action_id)
            self.stop(running)

    def _close(self, action_id: str, kind: str) -> bool:
        state = self.timers.get(action_id)
        if state is None or not state.is_running:
            logger.debug("Ignoring timer %s for idle action %r", kind, action_id)
            return False

        segment = state.time_segments[-1]
        # A clock stepping backwards must not produce a negative segment
        now = max(self._now(), segment.start_time)
        state.total_time += segment.close(now)
        state.start_time = None
        state.elapsed_time = 0
        if self.session.active_timer_action_id == action_id:
            self.session.active_timer_action_id = None
        self._cancel_tick()
        self.commit(action_id)
        self._emit(kind, action_id, now)
        return True

    def _emit(self, kind: str, action_id: str, timestamp: int) -> None:
        event = TimerEvent(kind=kind, action_id=action_id, timestamp=timestamp)
        for listener in list(self._listeners):
            listener(event)

    def _start_tick(self) -> None:
        self._cancel_tick()
        if self._scheduler is not None:
            self._tick = self._scheduler.every(self._tick_ms, self._on_tick)

    def _cancel_tick(self) -> None:
        if self._tick is not None:
            self._tick.cancel()
            self._tick = None

    def _on_tick(self) -> None:
        running = self.session.active_timer_action_id
        state = self.timers.get(running) if running is not None else None
        if state is None or not state.is_running:
            self._cancel_tick()
            return
        state.elapsed_time = self._now() - state.start_time
