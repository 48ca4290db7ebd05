import datetime as dt
import json
import logging
import unittest

from calendar_client.snapshot import ExistingEvent
from policy.model import PolicyModel, Priority
from scheduler.errors import PipelineStageError
from scheduler.pipeline import SchedulingPipeline
from scheduler.reconciler import ActionReconciler
from scheduler.types import OutcomeStatus

UTC = dt.timezone.utc
NOW = dt.datetime(2024, 1, 1, 6, 0, tzinfo=UTC)


class _CalendarStub:
    def __init__(self, events=None, read_error: Exception | None = None):
        self._events = list(events or [])
        self._read_error = read_error
        self.list_calls: list[dict[str, dt.datetime]] = []
        self.create_calls: list[dict[str, object]] = []

    def list_events(self, *, time_min, time_max):
        self.list_calls.append({"time_min": time_min, "time_max": time_max})
        if self._read_error is not None:
            raise self._read_error
        return list(self._events)

    def create_event(self, *, title, start, end, description=None, provenance=None):
        self.create_calls.append({"title": title, "start": start, "end": end})
        return f"evt-{len(self.create_calls)}"


class _OracleStub:
    def __init__(self, response: str = "", error: Exception | None = None):
        self._response = response
        self._error = error
        self.calls: list[dict[str, str]] = []

    def complete(self, prompt: str, *, prefix: str = "") -> str:
        self.calls.append({"prompt": prompt, "prefix": prefix})
        if self._error is not None:
            raise self._error
        return self._response


def _daily_workouts(days: int = 7) -> str:
    recommendations = []
    for offset in range(days):
        start = NOW + dt.timedelta(days=offset, hours=1)
        recommendations.append(
            {
                "priority": "HIGH",
                "title": "Light workout",
                "description": "15 min home workout",
                "rationale": "Health is priority 1",
                "action": {
                    "type": "create",
                    "title": "Light workout",
                    "start": start.isoformat(),
                    "end": (start + dt.timedelta(minutes=15)).isoformat(),
                },
            }
        )
    # The oracle continues after the pre-filled "{".
    return json.dumps({"recommendations": recommendations})[1:]


def _pipeline(calendar: _CalendarStub, oracle: _OracleStub, policy=None) -> SchedulingPipeline:
    return SchedulingPipeline(
        policy or PolicyModel(
            priorities=(Priority(1, "Health"),),
            recurring_events=("Light 15 min home workout every day",),
        ),
        calendar,
        oracle,
        ActionReconciler(
            calendar,
            logger=logging.getLogger("test.reconciler"),
            now_fn=lambda: NOW,
        ),
        now_fn=lambda: NOW,
        logger=logging.getLogger("test.pipeline"),
    )


class SchedulingPipelineTests(unittest.TestCase):
    def test_daily_recurring_entry_creates_seven_events(self) -> None:
        calendar = _CalendarStub()
        oracle = _OracleStub(_daily_workouts())

        report = _pipeline(calendar, oracle).run()

        self.assertEqual(7, len(report))
        self.assertEqual(
            [OutcomeStatus.APPLIED] * 7,
            [entry.outcome.status for entry in report.entries],
        )
        self.assertEqual(7, len(calendar.create_calls))
        self.assertEqual(1, len(oracle.calls))
        self.assertEqual("{", oracle.calls[0]["prefix"])
        self.assertIn("create at least 7 instances", oracle.calls[0]["prompt"])
        self.assertEqual(NOW + dt.timedelta(days=7), calendar.list_calls[0]["time_max"])

    def test_existing_events_reach_the_prompt(self) -> None:
        calendar = _CalendarStub(
            events=[ExistingEvent("Dentist", NOW + dt.timedelta(hours=3), NOW + dt.timedelta(hours=4))]
        )
        oracle = _OracleStub('"recommendations": []}')

        report = _pipeline(calendar, oracle).run()

        self.assertEqual(0, len(report))
        self.assertIn('"summary": "Dentist"', oracle.calls[0]["prompt"])

    def test_snapshot_failure_aborts_before_oracle(self) -> None:
        calendar = _CalendarStub(read_error=RuntimeError("calendar unavailable"))
        oracle = _OracleStub(_daily_workouts())

        with self.assertRaises(PipelineStageError) as context:
            _pipeline(calendar, oracle).run()

        self.assertEqual("snapshot", context.exception.stage)
        self.assertEqual([], oracle.calls)
        self.assertEqual([], calendar.create_calls)

    def test_oracle_failure_aborts_without_writes(self) -> None:
        calendar = _CalendarStub()
        oracle = _OracleStub(error=RuntimeError("timeout"))

        with self.assertRaises(PipelineStageError) as context:
            _pipeline(calendar, oracle).run()

        self.assertEqual("oracle", context.exception.stage)
        self.assertEqual([], calendar.create_calls)

    def test_malformed_output_aborts_without_writes(self) -> None:
        calendar = _CalendarStub()
        oracle = _OracleStub("not json at all")

        with self.assertRaises(PipelineStageError) as context:
            _pipeline(calendar, oracle).run()

        self.assertEqual("parse", context.exception.stage)
        self.assertEqual([], calendar.create_calls)


if __name__ == "__main__":
    unittest.main()
