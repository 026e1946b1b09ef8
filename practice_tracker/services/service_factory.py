"""
Service Factory for dependency injection following SOLID principles.

This module provides a factory for creating properly configured session
controllers with their collaborators injected.
"""
import threading
from typing import Callable, Optional

from ..models import Session
from .report_service import PracticeReportExporter, ReportService
from .scheduler import ManualScheduler, Scheduler, ThreadingScheduler
from .session_controller import IdentityProvider, SessionController, StaticIdentityProvider


class ServiceFactory:
    """
    Factory for creating service instances with proper dependency injection.

    The clock handed to the engines always matches the scheduler driving
    their ticks, so timestamps and tick counts share one time line.
    """

    def __init__(self):
        """Initialize factory with default configurations."""
        self._export_service: Optional[PracticeReportExporter] = None
        self._identity_provider: Optional[IdentityProvider] = None

    def create_report_service(self, clock: Optional[Callable[[], int]] = None) -> ReportService:
        return ReportService(clock=clock, export_service=self._get_export_service())

    def create_controller(
        self,
        scheduler: Scheduler,
        clock: Callable[[], int],
        session: Optional[Session] = None,
    ) -> SessionController:
        """
        Create a SessionController wired to ``scheduler`` and ``clock``.

        Args:
            scheduler: Tick source for timer display and waste accrual
            clock: Epoch millisecond time source
            session: Optional existing session to take ownership of

        Returns:
            Configured SessionController instance
        """
        return SessionController(
            session=session,
            scheduler=scheduler,
            clock=clock,
            identity_provider=self._get_identity_provider(),
            report_service=self.create_report_service(clock),
        )

    def create_manual_controller(self, start_ms: int = 0) -> SessionController:
        """Controller on a virtual clock; advance ``controller.scheduler`` to move time."""
        scheduler = ManualScheduler(start_ms=start_ms)
        return self.create_controller(scheduler, scheduler.now)

    def create_realtime_controller(self, lock: Optional[threading.RLock] = None) -> SessionController:
        """Controller on wall-clock ticks that serialise through ``lock``."""
        scheduler = ThreadingScheduler(lock=lock)
        return self.create_controller(scheduler, scheduler.now)

    def _get_export_service(self) -> PracticeReportExporter:
        """Get singleton export service."""
        if self._export_service is None:
            self._export_service = PracticeReportExporter()
        return self._export_service

    def _get_identity_provider(self) -> IdentityProvider:
        if self._identity_provider is None:
            self._identity_provider = StaticIdentityProvider()
        return self._identity_provider

    def configure_identity_provider(self, provider: IdentityProvider) -> None:
        """Configure the provider of the report author name - supports OCP."""
        self._identity_provider = provider

    def configure_custom_export_service(self, exporter: PracticeReportExporter) -> None:
        """Configure custom export service - supports OCP."""
        self._export_service = exporter
