"""
Session model for the Practice Efficiency Tracker application.

This module contains the Session dataclass, the aggregate root that holds
the practice metadata, the committed drill sequence and the tracking
cursor (current drill, phase, active timer).
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .drill import Drill
from .practice_info import PracticeInfo


class Phase(Enum):
    """Coarse stage of a practice session."""
    PRACTICE_INFO = "practiceInfo"
    DRILL_SETUP = "drills"
    TIME_WATCHER = "timeWatcher"


PHASE_ORDER = [Phase.PRACTICE_INFO, Phase.DRILL_SETUP, Phase.TIME_WATCHER]


@dataclass
class Session:
    """
    Represents the complete state of a practice session.

    Attributes:
        practice_info: Metadata of the practice
        drills: Committed drill sequence, index addressed
        current_drill_index: Index of the drill being configured or tracked
        phase: Current stage of the session
        active_timer_action_id: Timer running in the current drill, if any
        waste_tracking_armed: Whether waste time accrues while no timer runs
    """
    practice_info: PracticeInfo = field(default_factory=PracticeInfo)
    drills: List[Drill] = field(default_factory=list)
    current_drill_index: int = 0
    phase: Phase = Phase.PRACTICE_INFO
    active_timer_action_id: Optional[str] = None
    waste_tracking_armed: bool = False

    def has_drill(self, index: int) -> bool:
        return 0 <= index < len(self.drills)

    def current_drill(self) -> Optional[Drill]:
        if self.has_drill(self.current_drill_index):
            return self.drills[self.current_drill_index]
        return None

    def ensure_valid_index(self) -> None:
        """Clamp the current drill index back into range."""
        if not self.has_drill(self.current_drill_index):
            self.current_drill_index = 0

    def to_json(self) -> dict:
        """
        Convert Session to JSON-serializable dictionary.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        return {
            "practice_info": self.practice_info.to_dict(),
            "drills": [drill.to_dict() for drill in self.drills],
            "current_drill_index": self.current_drill_index,
            "phase": self.phase.value,
            "active_timer_action_id": self.active_timer_action_id,
            "waste_tracking_armed": self.waste_tracking_armed,
        }
