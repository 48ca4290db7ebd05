"""Calendar collaborator protocols consumed by the scheduling pipeline."""

from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional, Protocol

from .snapshot import ExistingEvent


class CalendarReaderLike(Protocol):
    """Lists events overlapping the half-open window ``[time_min, time_max)``."""
    def list_events(
        self,
        *,
        time_min: datetime,
        time_max: datetime,
    ) -> list[ExistingEvent]:
        ...


class CalendarWriterLike(Protocol):
    """Creates events tagged with opaque provenance metadata."""
    def create_event(
        self,
        *,
        title: str,
        start: datetime,
        end: datetime,
        description: Optional[str] = None,
        provenance: Optional[Mapping[str, str]] = None,
    ) -> str:
        ...
