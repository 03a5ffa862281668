# hefti_tui/Entries/__init__.py
from .errors import SyncError, ValidationError, StateError, TransportError
from .entry_row import EntryRow, EntrySnapshot, parse_duration, format_hours, EDITABLE_FIELDS
from .row_synchronizer import RowSynchronizer, SyncState, EntryBackend, DEFAULT_REQUEST_TIMEOUT
from .sync_registry import SyncRegistry
from .weekly_report import CategoryGroup, WeeklyReport, build_weekly_report, current_week, shift_week, week_days

__all__ = [
    "SyncError", "ValidationError", "StateError", "TransportError",
    "EntryRow", "EntrySnapshot", "parse_duration", "format_hours", "EDITABLE_FIELDS",
    "RowSynchronizer", "SyncState", "EntryBackend", "DEFAULT_REQUEST_TIMEOUT",
    "SyncRegistry",
    "CategoryGroup", "WeeklyReport", "build_weekly_report", "current_week", "shift_week", "week_days",
]
