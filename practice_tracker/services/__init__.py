"""
Services package for the Practice Efficiency Tracker.

This package contains service classes that handle business logic.
Includes factory for proper dependency injection following SOLID principles.
"""
from .scheduler import ManualScheduler, Scheduler, ThreadingScheduler, TickHandle
from .drill_service import DrillService
from .timer_service import TimerEvent, TimerService, TimerState
from .counter_service import CounterService
from .waste_time_service import WasteTimeService
from .report_service import (
    PracticeReportExporter, ReportService, aggregate_counts,
    aggregate_time_by_action, aggregate_time_by_action_for_drill,
    drill_boundaries, project_counter_events, project_segments,
    summarize_drills
)
from .session_controller import IdentityProvider, SessionController, StaticIdentityProvider
from .service_factory import ServiceFactory

__all__ = [
    "ManualScheduler", "Scheduler", "ThreadingScheduler", "TickHandle",
    "DrillService", "TimerEvent", "TimerService", "TimerState",
    "CounterService", "WasteTimeService", "PracticeReportExporter",
    "ReportService", "aggregate_counts", "aggregate_time_by_action",
    "aggregate_time_by_action_for_drill", "drill_boundaries",
    "project_counter_events", "project_segments", "summarize_drills",
    "IdentityProvider", "SessionController", "StaticIdentityProvider",
    "ServiceFactory"
]
