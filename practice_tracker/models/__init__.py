"""
Models package for the Practice Efficiency Tracker.

This package contains the core data models used throughout the application.
"""
from .practice_info import PracticeInfo
from .drill import (
    ActionButton, ActionKind, CounterRecord, Drill, TimeSegment, TimerRecord,
    create_drills, default_action_buttons
)
from .session import Phase, Session
from .report import (
    ActionTotal, CounterEvent, CounterTotal, DrillBoundary, DrillDuration,
    PracticeReport, ReportSegment
)

__all__ = [
    "PracticeInfo", "ActionButton", "ActionKind", "CounterRecord", "Drill",
    "TimeSegment", "TimerRecord", "create_drills", "default_action_buttons",
    "Phase", "Session", "ActionTotal", "CounterEvent", "CounterTotal",
    "DrillBoundary", "DrillDuration", "PracticeReport", "ReportSegment"
]
