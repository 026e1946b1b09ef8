"""
Session controller for the Practice Efficiency Tracker.

The controller owns the :class:`Session` and is the only place that mutates
it. It routes UI commands to the drill, timer, counter and waste time
services and guarantees the commit ordering between drills: the outgoing
drill is fully flushed before the engines are loaded for the next one.
"""
import logging
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol

from ..models import Drill, Phase, PracticeInfo, PracticeReport, Session
from ..models.session import PHASE_ORDER
from .counter_service import CounterService
from .drill_service import DrillService
from .report_service import ReportService
from .scheduler import Scheduler
from .timer_service import TimerService
from .waste_time_service import WasteTimeService

logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    """Supplies the display name printed on report headers."""

    def display_name(self) -> Optional[str]:
        ...


class StaticIdentityProvider:
    """Identity provider returning a fixed name (or none)."""

    def __init__(self, name: Optional[str] = None):
        self._name = name

    def display_name(self) -> Optional[str]:
        return self._name


class SessionController:
    """Single entry point for every read and write of a practice session."""

    def __init__(
        self,
        session: Optional[Session] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Callable[[], int]] = None,
        identity_provider: Optional[IdentityProvider] = None,
        report_service: Optional[ReportService] = None,
    ):
        self.session = session if session is not None else Session()
        self.scheduler = scheduler
        self.identity_provider = identity_provider or StaticIdentityProvider()
        self.drill_service = DrillService(self.session)
        self.timer_service = TimerService(self.session, scheduler=scheduler, clock=clock)
        self.counter_service = CounterService(self.session, clock=clock)
        self.waste_service = WasteTimeService(self.session, scheduler=scheduler)
        self.report_service = report_service or ReportService(clock=clock)

        if self.session.phase == Phase.TIME_WATCHER:
            self._open_tracking()

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------
    @property
    def practice_info(self) -> PracticeInfo:
        return replace(self.session.practice_info)

    @property
    def phase(self) -> Phase:
        return self.session.phase

    @property
    def current_drill_index(self) -> int:
        return self.session.current_drill_index

    @property
    def drills(self) -> List[Drill]:
        return [drill.copy() for drill in self.session.drills]

    @property
    def current_drill(self) -> Optional[Drill]:
        drill = self.session.current_drill()
        return drill.copy() if drill is not None else None

    @property
    def active_timer_action_id(self) -> Optional[str]:
        return self.session.active_timer_action_id

    @property
    def waste_time(self) -> int:
        if self.waste_service.loaded:
            return self.waste_service.waste_time
        drill = self.session.current_drill()
        return drill.waste_time if drill is not None else 0

    @property
    def tracking(self) -> bool:
        return self.timer_service.loaded

    def drill(self, drill_index: int) -> Optional[Drill]:
        if self.session.has_drill(drill_index):
            return self.session.drills[drill_index].copy()
        return None

    def live_state(self) -> Dict[str, Any]:
        """State the time watcher view renders on each refresh."""

        return {
            "current_drill_index": self.session.current_drill_index,
            "current_timer": self.session.active_timer_action_id,
            "timers": self.timer_service.live_state(),
            "counters": self.counter_service.live_state(),
            "waste_time": self.waste_time,
            "waste_tracking_armed": self.session.waste_tracking_armed,
        }

    def snapshot(self) -> Dict[str, Any]:
        data = self.session.to_json()
        data["live"] = self.live_state()
        return data

    # ------------------------------------------------------------------
    # Practice info and drill setup
    # ------------------------------------------------------------------
    def set_practice_info(self, **fields: Any) -> Dict[str, Any]:
        """
        Update practice metadata field by field.

        A changed ``drills_number`` (or one that no longer matches the drill
        sequence) regenerates every drill.
        """
        known = PracticeInfo.field_names()
        unknown = [name for name in fields if name not in known]
        if unknown:
            logger.warning("Ignoring unknown practice info fields: %s", ", ".join(unknown))

        previous_count = self.session.practice_info.drills_number
        applied = self.session.practice_info.apply(**fields)
        if "drills_number" in applied:
            count = applied["drills_number"]
            if count != previous_count or count != len(self.session.drills):
                self._regenerate_drills(count)
        return applied

    def set_drills_number(self, drills_number: Any) -> List[Drill]:
        """Set the drill count and always regenerate the drill sequence."""

        applied = self.session.practice_info.apply(drills_number=drills_number)
        self._regenerate_drills(applied["drills_number"])
        return self.drills

    def update_drill_tags(self, drill_index: int, tags: Iterable[str]) -> bool:
        return self.drill_service.update_drill_tags(drill_index, tags)

    def toggle_action_button(self, drill_index: int, action_id: str) -> bool:
        changed = self.drill_service.toggle_action_button(drill_index, action_id)
        if changed:
            self._reinitialize_if_current(drill_index)
        return changed

    def set_action_enabled(self, drill_index: int, action_id: str, enabled: bool) -> bool:
        changed = self.drill_service.set_action_enabled(drill_index, action_id, enabled)
        if changed:
            self._reinitialize_if_current(drill_index)
        return changed

    def reorder_action_buttons(self, drill_index: int, from_pos: int, to_pos: int) -> bool:
        return self.drill_service.reorder_action_buttons(drill_index, from_pos, to_pos)

    def move_action_button(self, drill_index: int, action_id: str, over_action_id: str) -> bool:
        return self.drill_service.move_action_button(drill_index, action_id, over_action_id)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def set_current_drill_index(self, drill_index: int) -> bool:
        if not self.session.has_drill(drill_index):
            logger.debug("Ignoring switch to unknown drill index %s", drill_index)
            return False
        if drill_index == self.session.current_drill_index:
            return True

        if self.tracking:
            self._close_tracking()
            self.session.current_drill_index = drill_index
            self._open_tracking()
        else:
            self.session.current_drill_index = drill_index
        return True

    def next_drill(self) -> bool:
        return self.set_current_drill_index(self.session.current_drill_index + 1)

    def previous_drill(self) -> bool:
        return self.set_current_drill_index(self.session.current_drill_index - 1)

    def advance_phase(self) -> Phase:
        phase = self.session.phase
        if phase == Phase.PRACTICE_INFO:
            count = self.session.practice_info.drills_number
            if len(self.session.drills) != count:
                self._regenerate_drills(count)
            self._set_phase(Phase.DRILL_SETUP)
        elif phase == Phase.DRILL_SETUP:
            self.session.current_drill_index = 0
            self._set_phase(Phase.TIME_WATCHER)
            self._open_tracking()
        return self.session.phase

    def retreat_phase(self) -> Phase:
        phase = self.session.phase
        if phase == Phase.TIME_WATCHER:
            self._close_tracking()
            self._set_phase(Phase.DRILL_SETUP)
        elif phase == Phase.DRILL_SETUP:
            self._set_phase(Phase.PRACTICE_INFO)
        return self.session.phase

    # ------------------------------------------------------------------
    # Live tracking
    # ------------------------------------------------------------------
    def start_timer(self, action_id: str) -> bool:
        return self._timer_command(self.timer_service.start, action_id)

    def pause_timer(self, action_id: str) -> bool:
        return self._timer_command(self.timer_service.pause, action_id)

    def stop_timer(self, action_id: str) -> bool:
        return self._timer_command(self.timer_service.stop, action_id)

    def reset_timer(self, action_id: str) -> bool:
        return self._timer_command(self.timer_service.reset, action_id)

    def increment_counter(self, action_id: str) -> bool:
        return self.counter_service.increment(action_id)

    def decrement_counter(self, action_id: str) -> bool:
        return self.counter_service.decrement(action_id)

    def reset_counter(self, action_id: str) -> bool:
        return self.counter_service.reset(action_id)

    def arm_waste_tracking(self, armed: bool = True) -> None:
        self.waste_service.set_armed(armed)

    def reset_waste_time(self) -> bool:
        return self.waste_service.reset()

    def finish_tracking(self) -> None:
        """Stop the running timer, disarm waste tracking and flush the open drill."""

        if not self.tracking:
            return
        self.timer_service.stop_active()
        self._sync_waste()
        self.waste_service.set_armed(False)
        self.timer_service.commit()
        self.waste_service.commit()
        logger.info("Tracking finished on drill index %s", self.session.current_drill_index)

    def reset_session(self) -> None:
        """Discard everything and return to the practice info phase."""

        self._close_tracking()
        self.session.practice_info = PracticeInfo()
        self.session.drills = []
        self.session.current_drill_index = 0
        self.session.active_timer_action_id = None
        self.session.waste_tracking_armed = False
        self._set_phase(Phase.PRACTICE_INFO)
        logger.info("Session reset")

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    def build_report(self) -> PracticeReport:
        if self.waste_service.loaded:
            self.waste_service.commit()
        return self.report_service.build_report(
            self.practice_info,
            self.drills,
            generated_by=self.identity_provider.display_name(),
        )

    def export_report_csv(self) -> str:
        return self.report_service.export_report_csv(self.build_report())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _set_phase(self, phase: Phase) -> None:
        if phase != self.session.phase:
            logger.info(
                "Phase %s -> %s (step %d of %d)",
                self.session.phase.value, phase.value,
                PHASE_ORDER.index(phase) + 1, len(PHASE_ORDER),
            )
        self.session.phase = phase

    def _open_tracking(self) -> None:
        self.session.ensure_valid_index()
        index = self.session.current_drill_index
        if not self.session.has_drill(index):
            return
        self.timer_service.load(index)
        self.counter_service.load(index)
        self.waste_service.load(index)

    def _close_tracking(self) -> None:
        # Waste first so the implicit timer stop does not restart accrual
        self.waste_service.unload()
        self.timer_service.unload()
        self.counter_service.unload()

    def _reinitialize_if_current(self, drill_index: int) -> None:
        if self.tracking and drill_index == self.session.current_drill_index:
            self._close_tracking()
            self._open_tracking()

    def _regenerate_drills(self, count: int) -> None:
        was_tracking = self.tracking
        self._close_tracking()
        self.drill_service.create_drills(count)
        self.session.current_drill_index = 0
        if was_tracking:
            self._open_tracking()

    def _timer_command(self, command: Callable[[str], bool], action_id: str) -> bool:
        result = command(action_id)
        self._sync_waste()
        return result

    def _sync_waste(self) -> None:
        self.waste_service.set_timer_active(self.session.active_timer_action_id is not None)
