"""
Drill models for the Practice Efficiency Tracker application.

A drill carries its configuration (tags and an ordered list of action
buttons) together with the committed tracking output of its timer and
counter actions.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Union

from ..utils import ACTION_TEMPLATE


class ActionKind(Enum):
    """Kind of instrument behind an action button."""
    TIMER = "timer"
    COUNTER = "counter"


@dataclass
class ActionButton:
    """An action instrument configured on a drill."""
    id: str
    kind: ActionKind
    enabled: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "type": self.kind.value, "enabled": self.enabled}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ActionButton:
        return cls(
            id=data["id"],
            kind=ActionKind(data.get("type", data.get("kind"))),
            enabled=bool(data.get("enabled", True)),
        )


@dataclass
class TimeSegment:
    """One contiguous running interval of a timer; ``end_time`` is None while open."""
    start_time: int
    end_time: Optional[int] = None
    duration: int = 0

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    def close(self, end_time: int) -> int:
        """Close the segment and return its duration."""
        self.end_time = end_time
        self.duration = end_time - self.start_time
        return self.duration

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration": self.duration,
        }


@dataclass
class TimerRecord:
    """Committed output of a timer action: closed total plus all segments."""
    total_time: int = 0
    time_segments: List[TimeSegment] = field(default_factory=list)

    @property
    def open_segment(self) -> Optional[TimeSegment]:
        if self.time_segments and self.time_segments[-1].is_open:
            return self.time_segments[-1]
        return None

    def copy(self) -> TimerRecord:
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_time": self.total_time,
            "time_segments": [segment.to_dict() for segment in self.time_segments],
        }


@dataclass
class CounterRecord:
    """Committed output of a counter action."""
    count: int = 0
    timestamps: List[int] = field(default_factory=list)

    def copy(self) -> CounterRecord:
        return CounterRecord(count=self.count, timestamps=list(self.timestamps))

    def to_dict(self) -> Dict[str, Any]:
        return {"count": self.count, "timestamps": list(self.timestamps)}


def default_action_buttons() -> List[ActionButton]:
    """Return a fresh clone of the action button template."""
    return [
        ActionButton(id=action_id, kind=ActionKind(kind), enabled=enabled)
        for action_id, kind, enabled in ACTION_TEMPLATE
    ]


@dataclass
class Drill:
    """
    Represents one drill of a practice session.

    Attributes:
        id: 1-based sequential id, fixed at creation
        tags: Category labels of the drill
        action_buttons: Ordered action instruments (order is rendering order)
        timer_data: Committed timer records keyed by action id
        counter_data: Committed counter records keyed by action id
        waste_time: Committed waste time in milliseconds
    """
    id: int
    tags: Set[str] = field(default_factory=set)
    action_buttons: List[ActionButton] = field(default_factory=default_action_buttons)
    timer_data: Dict[str, TimerRecord] = field(default_factory=dict)
    counter_data: Dict[str, CounterRecord] = field(default_factory=dict)
    waste_time: int = 0

    def find_action(self, action_id: str) -> Optional[ActionButton]:
        for action in self.action_buttons:
            if action.id == action_id:
                return action
        return None

    def action_position(self, action_id: str) -> int:
        """Return the position of an action in the button order, or -1."""
        for idx, action in enumerate(self.action_buttons):
            if action.id == action_id:
                return idx
        return -1

    def enabled_actions(self, kind: Optional[ActionKind] = None) -> List[ActionButton]:
        return [
            action for action in self.action_buttons
            if action.enabled and (kind is None or action.kind == kind)
        ]

    def is_enabled(self, action_id: str, kind: ActionKind) -> bool:
        action = self.find_action(action_id)
        return action is not None and action.enabled and action.kind == kind

    def record_for(self, action_id: str) -> Optional[Union[TimerRecord, CounterRecord]]:
        """Return the committed record of an action, dispatching on its kind."""
        action = self.find_action(action_id)
        if action is None:
            return None
        if action.kind == ActionKind.TIMER:
            return self.timer_data.get(action_id)
        return self.counter_data.get(action_id)

    def total_timer_time(self) -> int:
        return sum(record.total_time for record in self.timer_data.values())

    def copy(self) -> Drill:
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "tags": sorted(self.tags),
            "action_buttons": [action.to_dict() for action in self.action_buttons],
            "timer_data": {k: v.to_dict() for k, v in self.timer_data.items()},
            "counter_data": {k: v.to_dict() for k, v in self.counter_data.items()},
            "waste_time": self.waste_time,
        }


def create_drills(drills_number: int) -> List[Drill]:
    """
    Create a fresh drill sequence with ids 1..n.

    Every drill receives its own clone of the action template, so later
    toggles or reorders never leak between drills.
    """
    return [Drill(id=n + 1) for n in range(max(0, int(drills_number)))]
