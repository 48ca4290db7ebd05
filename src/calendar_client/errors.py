class CalendarError(Exception):
    """Base exception for calendar integrations."""


class CalendarConfigurationError(CalendarError):
    """Raised when calendar configuration is invalid."""


class CalendarDependencyError(CalendarError):
    """Raised when the Google client libraries are not installed."""


class CalendarReadError(CalendarError):
    """Raised when listing calendar events fails."""


class CalendarWriteError(CalendarError):
    """Raised when creating a calendar event fails."""
