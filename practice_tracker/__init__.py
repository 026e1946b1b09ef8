"""
Practice Efficiency Tracker

Tracks how a sports practice session is spent: drills are configured with
timer and counter actions, tracked live with a single active timer at a
time, and summarised in a report afterwards.

This package provides the session state machine and a Flask web interface
for coaches to drive it from the sideline.
"""
from .models import Drill, Phase, PracticeInfo, Session
from .services import ManualScheduler, ReportService, ServiceFactory, SessionController
from .ui import create_app, run_web_app
from .utils import APP_TITLE, fmt_duration, fmt_stopwatch, now_ms

__version__ = "1.0.0"

__all__ = [
    "Drill", "Phase", "PracticeInfo", "Session", "ManualScheduler",
    "ReportService", "ServiceFactory", "SessionController", "create_app",
    "run_web_app", "APP_TITLE", "fmt_duration", "fmt_stopwatch", "now_ms"
]
