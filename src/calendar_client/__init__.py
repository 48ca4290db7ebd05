"""Calendar read/write integration and run snapshots."""

from .config import CalendarConfig
from .contracts import CalendarReaderLike, CalendarWriterLike
from .errors import (
    CalendarConfigurationError,
    CalendarDependencyError,
    CalendarError,
    CalendarReadError,
    CalendarWriteError,
)
from .google_calendar import GoogleCalendar
from .snapshot import CalendarSnapshot, ExistingEvent, capture_snapshot

__all__ = [
    "CalendarConfig",
    "CalendarConfigurationError",
    "CalendarDependencyError",
    "CalendarError",
    "CalendarReadError",
    "CalendarReaderLike",
    "CalendarSnapshot",
    "CalendarWriteError",
    "CalendarWriterLike",
    "ExistingEvent",
    "GoogleCalendar",
    "capture_snapshot",
]
