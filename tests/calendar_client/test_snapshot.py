import datetime as dt
import logging
import unittest

from calendar_client.snapshot import CalendarSnapshot, ExistingEvent, capture_snapshot

UTC = dt.timezone.utc


def _at(day: int, hour: int, minute: int = 0) -> dt.datetime:
    return dt.datetime(2024, 1, day, hour, minute, tzinfo=UTC)


class _ReaderStub:
    def __init__(self, events=None, error: Exception | None = None):
        self._events = list(events or [])
        self._error = error
        self.calls: list[dict[str, dt.datetime]] = []

    def list_events(self, *, time_min: dt.datetime, time_max: dt.datetime):
        self.calls.append({"time_min": time_min, "time_max": time_max})
        if self._error is not None:
            raise self._error
        return list(self._events)


class CalendarSnapshotTests(unittest.TestCase):
    def test_duplicates_are_dropped_by_title_and_times(self) -> None:
        events = [
            ExistingEvent("Standup", _at(2, 9), _at(2, 9, 15), event_id="a"),
            ExistingEvent("Standup", _at(2, 9), _at(2, 9, 15), event_id="b"),
            ExistingEvent("Standup", _at(3, 9), _at(3, 9, 15), event_id="c"),
        ]

        snapshot = CalendarSnapshot.from_events(
            events,
            window_start=_at(1, 0),
            window_end=_at(8, 0),
        )

        self.assertEqual(2, len(snapshot))
        self.assertEqual("a", snapshot.events[0].event_id)

    def test_events_are_sorted_by_start_then_title(self) -> None:
        events = [
            ExistingEvent("Lunch", _at(2, 12), _at(2, 13)),
            ExistingEvent("B", _at(2, 9), _at(2, 10)),
            ExistingEvent("A", _at(2, 9), _at(2, 10)),
        ]

        snapshot = CalendarSnapshot.from_events(
            events,
            window_start=_at(1, 0),
            window_end=_at(8, 0),
        )

        self.assertEqual(["A", "B", "Lunch"], [event.title for event in snapshot.events])

    def test_window_requires_timezone(self) -> None:
        with self.assertRaises(ValueError):
            CalendarSnapshot(
                window_start=dt.datetime(2024, 1, 1),
                window_end=dt.datetime(2024, 1, 8),
            )

    def test_capture_snapshot_reads_lookback_and_lookahead_window(self) -> None:
        reader = _ReaderStub(
            events=[
                ExistingEvent("Gym", _at(2, 18), _at(2, 19), automated=True),
                ExistingEvent("Gym", _at(2, 18), _at(2, 19), automated=True),
            ]
        )
        now = _at(2, 8)

        snapshot = capture_snapshot(
            reader,
            now=now,
            lookback_days=1,
            lookahead_days=7,
            logger=logging.getLogger("test"),
        )

        self.assertEqual(now - dt.timedelta(days=1), reader.calls[0]["time_min"])
        self.assertEqual(now + dt.timedelta(days=7), reader.calls[0]["time_max"])
        self.assertEqual(1, len(snapshot))
        self.assertEqual(1, snapshot.automated_count)

    def test_capture_snapshot_propagates_reader_failure(self) -> None:
        reader = _ReaderStub(error=RuntimeError("calendar down"))

        with self.assertRaises(RuntimeError):
            capture_snapshot(reader, now=_at(2, 8))


if __name__ == "__main__":
    unittest.main()
