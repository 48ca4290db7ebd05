"""Compose policy and calendar state into a single oracle prompt.

The builder is pure: identical policy, snapshot and ``now`` always render a
byte-identical prompt. Hard constraints are passed along as text; whether the
oracle honored them is not re-checked here or in the parser.
"""

from __future__ import annotations

import datetime as dt
import json
from typing import Iterable

from calendar_client.snapshot import CalendarSnapshot
from policy.model import PolicyModel

from .policy_extractors import adhoc_deadline, format_instant, recurrence_requirement
from .types import OracleRequest, ResponseShape

RESPONSE_FORMAT_EXAMPLE = """{
  "recommendations": [
    {
      "priority": "HIGH" | "MEDIUM" | "LOW",
      "category": "conflict" | "optimization" | "pattern" | "protection",
      "title": "Short human readable title",
      "description": "What should be done",
      "rationale": "Why this change is recommended",
      "action":
        {"type": "create", "title": "string", "description": "string", "start": "ISO-8601 with offset", "end": "ISO-8601 with offset"}
        | {"type": "move", "event_ref": "existing event title", "start": "ISO-8601 with offset", "end": "ISO-8601 with offset"}
        | {"type": "delete", "event_ref": "existing event title"}
    }
  ]
}"""


class OracleRequestBuilder:
    def __init__(self, *, lookahead_days: int = 7, response_prefix: str = "{"):
        if lookahead_days < 1:
            raise ValueError(f"lookahead_days must be >= 1, got: {lookahead_days}")
        self._lookahead_days = lookahead_days
        self._response_prefix = response_prefix
        self._shape = ResponseShape()

    @property
    def response_shape(self) -> ResponseShape:
        return self._shape

    @property
    def response_prefix(self) -> str:
        return self._response_prefix

    def build(
        self,
        policy: PolicyModel,
        snapshot: CalendarSnapshot,
        now: dt.datetime,
    ) -> OracleRequest:
        if now.tzinfo is None:
            raise ValueError("now must include timezone information.")

        window_end = now + dt.timedelta(days=self._lookahead_days)
        sections = [
            "You are a scheduling assistant optimizing my calendar based on my "
            "scheduling policy and existing commitments.",
            f"Current time: {format_instant(now)} ({now.strftime('%A')}).\n"
            f"Planning window: {format_instant(now)} to {format_instant(window_end)} "
            f"({self._lookahead_days} days).",
            self._priorities_section(policy),
            self._directives_section(policy),
            self._hard_constraints_section(policy),
            self._recurring_section(policy),
            self._adhoc_section(policy, now=now, window_end=window_end),
            self._calendar_section(snapshot, now=now),
            self._response_section(),
        ]
        prompt = "\n\n".join(section for section in sections if section)
        return OracleRequest(
            prompt=prompt,
            response_prefix=self._response_prefix,
            response_shape=self._shape,
        )

    @staticmethod
    def _priorities_section(policy: PolicyModel) -> str:
        if not policy.priorities:
            return ""
        lines = ["PRIORITIES (lower rank wins ties):"]
        lines.extend(f"{item.rank}. {item.label}" for item in policy.priorities)
        return "\n".join(lines)

    @staticmethod
    def _directives_section(policy: PolicyModel) -> str:
        groups = (
            ("General directives", policy.general_directives),
            ("Energy directives", policy.energy_directives),
            ("Recovery directives", policy.recovery_directives),
            ("User directives", policy.user_directives),
            ("System rules", policy.system_rules),
            ("Adaptation notes", policy.adaptation_notes),
        )
        blocks = [
            _bullets(f"{name} (earlier entries take precedence):", entries)
            for name, entries in groups
            if entries
        ]
        if policy.capitalize_task_names:
            blocks.append("Capitalize every task name you create.")
        return "\n\n".join(blocks)

    @staticmethod
    def _hard_constraints_section(policy: PolicyModel) -> str:
        if not policy.hard_constraints:
            return ""
        return _bullets(
            "HARD CONSTRAINTS (every created or moved event MUST respect these "
            "literally, including day bounds and work hours):",
            policy.hard_constraints,
        )

    def _recurring_section(self, policy: PolicyModel) -> str:
        if not policy.recurring_events:
            return ""
        lines = [
            "RECURRING EVENTS (each requires generated instances inside the "
            "planning window):"
        ]
        for index, entry in enumerate(policy.recurring_events, start=1):
            requirement = recurrence_requirement(
                entry,
                lookahead_days=self._lookahead_days,
            )
            noun = "instance" if requirement.instances == 1 else "instances"
            lines.append(
                f"{index}. {entry} -> {requirement.frequency}: create at least "
                f"{requirement.instances} {noun} in the next {self._lookahead_days} days"
            )
        return "\n".join(lines)

    @staticmethod
    def _adhoc_section(
        policy: PolicyModel,
        *,
        now: dt.datetime,
        window_end: dt.datetime,
    ) -> str:
        if not policy.adhoc_requests:
            return ""
        lines = [
            "AD-HOC REQUESTS (schedule each strictly inside its deadline window):"
        ]
        for index, request in enumerate(policy.adhoc_requests, start=1):
            deadline = adhoc_deadline(request, now=now, default_deadline=window_end)
            lines.append(
                f"{index}. {request} -> window: {format_instant(now)} to "
                f"{format_instant(deadline, reference=now)}"
            )
        return "\n".join(lines)

    @staticmethod
    def _calendar_section(snapshot: CalendarSnapshot, *, now: dt.datetime) -> str:
        events = [
            {
                "summary": event.title,
                "start": format_instant(event.start, reference=now),
                "end": format_instant(event.end, reference=now),
            }
            for event in snapshot.events
        ]
        header = f"EXISTING CALENDAR EVENTS ({len(events)}):"
        if snapshot.automated_count:
            header += (
                f"\n{snapshot.automated_count} of them were created by this "
                "assistant on earlier runs; do not create duplicates of them."
            )
        return header + "\n" + json.dumps(events, indent=2, ensure_ascii=False)

    def _response_section(self) -> str:
        return (
            "Respond ONLY with a JSON object of the following shape, no Markdown, "
            "no prose:\n"
            f"{RESPONSE_FORMAT_EXAMPLE}\n"
            f'The top-level key MUST be "{self._shape.sequence_field}". Allowed '
            f"priorities: {', '.join(self._shape.priorities)}. Allowed action "
            f"types: {', '.join(self._shape.action_types)}. Every end must be "
            "after its start and every datetime must include a UTC offset."
        )


def _bullets(title: str, entries: Iterable[str]) -> str:
    return "\n".join([title, *(f"- {entry}" for entry in entries)])
