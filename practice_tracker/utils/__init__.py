"""
Utilities package for the Practice Efficiency Tracker.

This package contains utility functions used throughout the application.
"""
from .time_utils import fmt_duration, fmt_stopwatch, now_iso, now_ms
from .logging_utils import configure_logging
from .constants import (
    APP_TITLE, TIMER_TICK_MS, WASTE_TICK_MS, ACTION_TEMPLATE, DRILL_TAGS,
    WASTE_TIME_ACTION_ID, action_color, action_label
)

__all__ = [
    "fmt_duration", "fmt_stopwatch", "now_iso", "now_ms", "configure_logging",
    "APP_TITLE", "TIMER_TICK_MS", "WASTE_TICK_MS", "ACTION_TEMPLATE",
    "DRILL_TAGS", "WASTE_TIME_ACTION_ID", "action_color", "action_label"
]
