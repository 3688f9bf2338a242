"""Services layer - Business logic"""

from .calendar_service import CalendarService
from .report_service import ReportService
from .export_service import ExportService

__all__ = ["CalendarService", "ReportService", "ExportService"]
