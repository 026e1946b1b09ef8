"""Counter service for the Practice Efficiency Tracker application."""

import logging
from typing import Callable, Dict, Optional

from ..models import ActionKind, CounterRecord, Drill, Session
from ..utils import now_ms

logger = logging.getLogger(__name__)


class CounterService:
    """
    Tally counters of the drill currently open.

    Unlike timers, every effective mutation is committed into the drill's
    ``counter_data`` right away.
    """

    def __init__(self, session: Session, clock: Optional[Callable[[], int]] = None):
        self.session = session
        self._clock = clock
        self._drill_index: Optional[int] = None
        self.counters: Dict[str, CounterRecord] = {}

    @property
    def loaded(self) -> bool:
        return self._drill_index is not None

    def load(self, drill_index: int) -> bool:
        """Resume counters of a drill from its committed records."""

        self.unload()
        if not self.session.has_drill(drill_index):
            logger.debug("Ignoring counter load for unknown drill index %s", drill_index)
            return False

        drill = self.session.drills[drill_index]
        self.counters = {}
        for action in drill.enabled_actions(ActionKind.COUNTER):
            saved = drill.record_for(action.id)
            self.counters[action.id] = saved.copy() if saved is not None else CounterRecord()
        self._drill_index = drill_index
        return True

    def unload(self) -> None:
        self.counters = {}
        self._drill_index = None

    def increment(self, action_id: str) -> bool:
        counter = self._accepted(action_id, "increment")
        if counter is None:
            return False
        counter.count += 1
        counter.timestamps.append(self._now())
        self._commit(action_id)
        return True

    def decrement(self, action_id: str) -> bool:
        """Undo the most recent increment; a zero counter stays at zero."""

        counter = self._accepted(action_id, "decrement")
        if counter is None:
            return False
        if counter.count == 0:
            return False
        counter.count -= 1
        if counter.timestamps:
            counter.timestamps.pop()
        self._commit(action_id)
        return True

    def reset(self, action_id: str) -> bool:
        counter = self._accepted(action_id, "reset")
        if counter is None:
            return False
        counter.count = 0
        counter.timestamps = []
        self._commit(action_id)
        return True

    def count(self, action_id: str) -> int:
        counter = self.counters.get(action_id)
        return counter.count if counter is not None else 0

    def live_state(self) -> Dict[str, dict]:
        return {action_id: counter.to_dict() for action_id, counter in self.counters.items()}

    def _now(self) -> int:
        return int(self._clock()) if self._clock is not None else now_ms()

    def _drill(self) -> Optional[Drill]:
        if self._drill_index is None or not self.session.has_drill(self._drill_index):
            return None
        return self.session.drills[self._drill_index]

    def _accepted(self, action_id: str, command: str) -> Optional[CounterRecord]:
        drill = self._drill()
        if drill is None or not drill.is_enabled(action_id, ActionKind.COUNTER):
            logger.debug("Ignoring counter %s for unavailable action %r", command, action_id)
            return None
        return self.counters.get(action_id)

    def _commit(self, action_id: str) -> None:
        drill = self._drill()
        if drill is not None:
            drill.counter_data[action_id] = self.counters[action_id].copy()
