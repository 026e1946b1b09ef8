"""Dataclasses representing practice reports for the tracker app."""

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional


@dataclass
class ReportSegment:
    """A closed timer segment expressed relative to the practice start."""

    drill_id: int
    action_id: str
    action_label: str
    start_offset: int
    end_offset: int
    duration: int
    color: str


@dataclass
class CounterEvent:
    """A counter increment expressed relative to the practice start."""

    drill_id: int
    action_id: str
    action_label: str
    timestamp: int


@dataclass
class DrillBoundary:
    """Timeline marker at the first segment of a drill."""

    drill_id: int
    drill_label: str
    start_offset: int


@dataclass
class ActionTotal:
    """Accumulated timer time of one action."""

    action_id: str
    action_label: str
    total_time: int


@dataclass
class CounterTotal:
    """Accumulated count of one counter action."""

    action_id: str
    action_label: str
    count: int


@dataclass
class DrillDuration:
    """Time summary of a single drill."""

    drill_id: int
    drill_label: str
    tags: List[str]
    timer_time: int
    waste_time: int
    total_time: int
    start_offset: Optional[int] = None
    end_offset: Optional[int] = None
    counters: Dict[str, int] = field(default_factory=dict)


@dataclass
class PracticeReport:
    """Snapshot of the committed practice data prepared for display/export."""

    generated_ts: int
    generated_by: Optional[str]
    practice_info: Dict[str, object]
    total_drills: int
    total_timer_time: int
    total_waste_time: int
    total_time: int
    waste_percent: int
    drills: List[DrillDuration] = field(default_factory=list)
    action_totals: List[ActionTotal] = field(default_factory=list)
    counter_totals: List[CounterTotal] = field(default_factory=list)
    segments: List[ReportSegment] = field(default_factory=list)
    counter_events: List[CounterEvent] = field(default_factory=list)
    drill_boundaries: List[DrillBoundary] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)
