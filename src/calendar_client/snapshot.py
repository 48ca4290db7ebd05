"""Bounded, deduplicated view of existing calendar events for one run."""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from .contracts import CalendarReaderLike


@dataclass(frozen=True)
class ExistingEvent:
    title: str
    start: dt.datetime
    end: dt.datetime
    event_id: Optional[str] = None
    automated: bool = False

    @property
    def key(self) -> tuple[str, dt.datetime, dt.datetime]:
        return (self.title, self.start, self.end)


@dataclass(frozen=True)
class CalendarSnapshot:
    """Events for ``[window_start, window_end)``, captured once per run."""

    window_start: dt.datetime
    window_end: dt.datetime
    events: tuple[ExistingEvent, ...] = ()

    def __post_init__(self) -> None:
        if self.window_start.tzinfo is None or self.window_end.tzinfo is None:
            raise ValueError("Snapshot window bounds must include timezone information.")
        if self.window_end <= self.window_start:
            raise ValueError("Snapshot window end must be after start.")

    @classmethod
    def from_events(
        cls,
        events: Iterable[ExistingEvent],
        *,
        window_start: dt.datetime,
        window_end: dt.datetime,
    ) -> "CalendarSnapshot":
        unique: dict[tuple[str, dt.datetime, dt.datetime], ExistingEvent] = {}
        for event in events:
            unique.setdefault(event.key, event)
        ordered = sorted(unique.values(), key=lambda event: (event.start, event.title))
        return cls(
            window_start=window_start,
            window_end=window_end,
            events=tuple(ordered),
        )

    @property
    def automated_count(self) -> int:
        return sum(1 for event in self.events if event.automated)

    def __len__(self) -> int:
        return len(self.events)


def capture_snapshot(
    reader: "CalendarReaderLike",
    *,
    now: dt.datetime,
    lookback_days: int = 0,
    lookahead_days: int = 7,
    logger: Optional[logging.Logger] = None,
) -> CalendarSnapshot:
    """Read the calendar window around ``now`` and normalize it.

    Reader failures propagate unchanged.
    """
    logger = logger or logging.getLogger(__name__)
    if now.tzinfo is None:
        raise ValueError("now must include timezone information.")

    window_start = now - dt.timedelta(days=lookback_days)
    window_end = now + dt.timedelta(days=lookahead_days)
    events = reader.list_events(time_min=window_start, time_max=window_end)
    snapshot = CalendarSnapshot.from_events(
        events,
        window_start=window_start,
        window_end=window_end,
    )
    logger.info(
        "Captured %d events between %s and %s (%d duplicates dropped)",
        len(snapshot),
        window_start.isoformat(timespec="minutes"),
        window_end.isoformat(timespec="minutes"),
        len(events) - len(snapshot),
    )
    return snapshot
