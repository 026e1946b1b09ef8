"""Waste time accrual for the Practice Efficiency Tracker application."""

import logging
from typing import Optional

from ..models import Drill, Session
from ..utils import WASTE_TICK_MS
from .scheduler import Scheduler, TickHandle

logger = logging.getLogger(__name__)


class WasteTimeService:
    """
    Accrue dead time for the open drill.

    A tick adds ``tick_ms`` to the live waste time while the service is
    loaded, tracking is armed and no timer is running. The live value is
    committed into the drill whenever accrual suspends and on unload.
    """

    def __init__(
        self,
        session: Session,
        scheduler: Optional[Scheduler] = None,
        tick_ms: int = WASTE_TICK_MS,
    ):
        self.session = session
        self._scheduler = scheduler
        self._tick_ms = tick_ms
        self._tick: Optional[TickHandle] = None
        self._drill_index: Optional[int] = None
        self._timer_active = False
        self.waste_time = 0

    @property
    def loaded(self) -> bool:
        return self._drill_index is not None

    @property
    def accruing(self) -> bool:
        return self._tick is not None

    def load(self, drill_index: int) -> bool:
        """Resume waste time of a drill from its committed value."""

        self.unload()
        if not self.session.has_drill(drill_index):
            return False
        self.waste_time = self.session.drills[drill_index].waste_time
        self._drill_index = drill_index
        self._timer_active = self.session.active_timer_action_id is not None
        self._sync()
        return True

    def unload(self) -> None:
        if not self.loaded:
            return
        self._cancel_tick()
        self.commit()
        self._drill_index = None
        self.waste_time = 0

    def set_armed(self, armed: bool) -> None:
        self.session.waste_tracking_armed = bool(armed)
        self._sync()

    def set_timer_active(self, active: bool) -> None:
        self._timer_active = bool(active)
        self._sync()

    def reset(self) -> bool:
        """Explicit user reset of the open drill's waste time."""

        if not self.loaded:
            return False
        self.waste_time = 0
        self.commit()
        return True

    def commit(self) -> None:
        drill = self._drill()
        if drill is not None:
            drill.waste_time = self.waste_time

    def _drill(self) -> Optional[Drill]:
        if self._drill_index is None or not self.session.has_drill(self._drill_index):
            return None
        return self.session.drills[self._drill_index]

    def _sync(self) -> None:
        should_accrue = (
            self.loaded
            and self.session.waste_tracking_armed
            and not self._timer_active
        )
        if should_accrue and self._tick is None:
            if self._scheduler is not None:
                self._tick = self._scheduler.every(self._tick_ms, self._on_tick)
                logger.debug("Waste time accrual resumed for drill index %s", self._drill_index)
        elif not should_accrue and self._tick is not None:
            self._cancel_tick()
            self.commit()
            logger.debug("Waste time accrual suspended at %s ms", self.waste_time)

    def _cancel_tick(self) -> None:
        if self._tick is not None:
            self._tick.cancel()
            self._tick = None

    def _on_tick(self) -> None:
        self.waste_time += self._tick_ms
