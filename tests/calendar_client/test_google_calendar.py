import datetime as dt
import logging
import unittest

from calendar_client.errors import CalendarReadError, CalendarWriteError
from calendar_client.google_calendar import GoogleCalendar

UTC = dt.timezone.utc


class _Request:
    def __init__(self, result=None, error: Exception | None = None):
        self._result = result
        self._error = error

    def execute(self):
        if self._error is not None:
            raise self._error
        return self._result


class _EventsResource:
    def __init__(self, pages=None, insert_result=None, error: Exception | None = None):
        self._pages = list(pages or [])
        self._insert_result = insert_result if insert_result is not None else {"id": "evt-1"}
        self._error = error
        self.list_calls: list[dict[str, object]] = []
        self.insert_calls: list[dict[str, object]] = []

    def list(self, **kwargs):
        self.list_calls.append(kwargs)
        if self._error is not None:
            return _Request(error=self._error)
        return _Request(self._pages.pop(0))

    def insert(self, *, calendarId: str, body: dict):
        self.insert_calls.append({"calendarId": calendarId, "body": body})
        if self._error is not None:
            return _Request(error=self._error)
        return _Request(self._insert_result)


class _ApiStub:
    def __init__(self, resource: _EventsResource):
        self.resource = resource

    def events(self):
        return self.resource


def _calendar(resource: _EventsResource) -> GoogleCalendar:
    return GoogleCalendar(
        "primary",
        "",
        page_size=2,
        logger=logging.getLogger("test"),
        api=_ApiStub(resource),
    )


class GoogleCalendarTests(unittest.TestCase):
    def test_list_events_follows_pages_and_normalizes(self) -> None:
        resource = _EventsResource(
            pages=[
                {
                    "items": [
                        {
                            "id": "1",
                            "summary": "Standup",
                            "start": {"dateTime": "2024-01-02T09:00:00Z"},
                            "end": {"dateTime": "2024-01-02T09:15:00Z"},
                        },
                        {
                            "id": "2",
                            "summary": "Workout",
                            "start": {"dateTime": "2024-01-02T07:00:00+00:00"},
                            "end": {"dateTime": "2024-01-02T07:15:00+00:00"},
                            "extendedProperties": {
                                "private": {"planner_origin": "calendar-planner"}
                            },
                        },
                    ],
                    "nextPageToken": "page-2",
                },
                {
                    "items": [
                        {
                            "id": "3",
                            "start": {"date": "2024-01-03"},
                            "end": {"date": "2024-01-04"},
                        },
                        {"id": "4", "summary": "Broken", "start": {}, "end": {}},
                    ]
                },
            ]
        )
        calendar = _calendar(resource)

        events = calendar.list_events(
            time_min=dt.datetime(2024, 1, 1, tzinfo=UTC),
            time_max=dt.datetime(2024, 1, 8, tzinfo=UTC),
        )

        self.assertEqual(2, len(resource.list_calls))
        self.assertNotIn("pageToken", resource.list_calls[0])
        self.assertEqual("page-2", resource.list_calls[1]["pageToken"])
        self.assertEqual("2024-01-01T00:00:00Z", resource.list_calls[0]["timeMin"])
        self.assertTrue(resource.list_calls[0]["singleEvents"])

        self.assertEqual(["Standup", "Workout", "No Title"], [e.title for e in events])
        self.assertFalse(events[0].automated)
        self.assertTrue(events[1].automated)
        self.assertEqual(dt.datetime(2024, 1, 2, 9, 0, tzinfo=UTC), events[0].start)
        self.assertEqual(dt.datetime(2024, 1, 3, tzinfo=UTC), events[2].start)

    def test_list_events_wraps_api_failures(self) -> None:
        calendar = _calendar(_EventsResource(error=RuntimeError("quota")))

        with self.assertRaises(CalendarReadError):
            calendar.list_events(
                time_min=dt.datetime(2024, 1, 1, tzinfo=UTC),
                time_max=dt.datetime(2024, 1, 8, tzinfo=UTC),
            )

    def test_create_event_attaches_provenance(self) -> None:
        resource = _EventsResource(insert_result={"id": "evt-42"})
        calendar = _calendar(resource)

        event_id = calendar.create_event(
            title="Light workout",
            start=dt.datetime(2024, 1, 1, 7, 0, tzinfo=UTC),
            end=dt.datetime(2024, 1, 1, 7, 15, tzinfo=UTC),
            description="Home workout",
            provenance={"origin": "calendar-planner", "priority": "HIGH"},
        )

        self.assertEqual("evt-42", event_id)
        body = resource.insert_calls[0]["body"]
        self.assertEqual("Light workout", body["summary"])
        self.assertEqual("Home workout", body["description"])
        self.assertEqual(
            {"planner_origin": "calendar-planner", "planner_priority": "HIGH"},
            body["extendedProperties"]["private"],
        )

    def test_create_event_rejects_naive_or_empty_window(self) -> None:
        calendar = _calendar(_EventsResource())
        start = dt.datetime(2024, 1, 1, 7, 0, tzinfo=UTC)

        with self.assertRaises(ValueError):
            calendar.create_event(title="X", start=start, end=start)
        with self.assertRaises(ValueError):
            calendar.create_event(
                title="X",
                start=dt.datetime(2024, 1, 1, 7, 0),
                end=dt.datetime(2024, 1, 1, 8, 0),
            )

    def test_create_event_requires_event_id(self) -> None:
        calendar = _calendar(_EventsResource(insert_result={}))

        with self.assertRaises(CalendarWriteError):
            calendar.create_event(
                title="X",
                start=dt.datetime(2024, 1, 1, 7, 0, tzinfo=UTC),
                end=dt.datetime(2024, 1, 1, 8, 0, tzinfo=UTC),
            )


if __name__ == "__main__":
    unittest.main()
