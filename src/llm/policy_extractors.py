from __future__ import annotations

import datetime as dt
import math
import re
from dataclasses import dataclass
from typing import Optional

_NUMBER_WORDS = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "fourteen": 14,
}

_WEEKDAYS = r"(?:monday|tuesday|wednesday|thursday|friday|saturday|sunday)s?"

_COUNT_PATTERN = re.compile(r"\b(\d{1,2}|" + "|".join(_NUMBER_WORDS) + r")\s*(?:x|times)\b")
_WORKDAY_PATTERN = re.compile(r"\b(?:every|each)\s+(?:weekday|workday|work\s+day)s?\b")
_DAILY_PATTERN = re.compile(
    r"\b(?:every\s*day|each\s+day|daily|every\s+(?:morning|evening|night))\b"
)
_WEEKLY_PATTERN = re.compile(
    r"\b(?:every\s+week|each\s+week|weekly|per\s+week|once\s+a\s+week|"
    r"(?:every|each|on)\s+" + _WEEKDAYS + r")\b"
)
_MONTHLY_PATTERN = re.compile(r"\b(?:every\s+month|each\s+month|monthly)\b")
_NEXT_DAYS_PATTERN = re.compile(
    r"\b(?:next|within|in)\s+(?:the\s+next\s+)?(\d{1,3}|"
    + "|".join(_NUMBER_WORDS)
    + r")\s+days?\b"
)


@dataclass(frozen=True)
class RecurrenceRequirement:
    frequency: str
    instances: int


def _as_number(token: str) -> int:
    if token.isdigit():
        return int(token)
    return _NUMBER_WORDS[token]


def recurrence_requirement(entry: str, *, lookahead_days: int) -> RecurrenceRequirement:
    """Estimate how many instances of a recurring entry the window must contain."""
    lowered = entry.lower()
    weeks = max(1, math.ceil(lookahead_days / 7))

    daily = _DAILY_PATTERN.search(lowered) is not None
    count = _COUNT_PATTERN.search(lowered)
    if count:
        times = max(1, _as_number(count.group(1)))
        if daily:
            return RecurrenceRequirement("per day", times * lookahead_days)
        return RecurrenceRequirement("per week", times * weeks)
    if _WORKDAY_PATTERN.search(lowered):
        return RecurrenceRequirement("weekdays", 5 * weeks)
    if daily:
        return RecurrenceRequirement("daily", lookahead_days)
    if _WEEKLY_PATTERN.search(lowered):
        return RecurrenceRequirement("weekly", weeks)
    if _MONTHLY_PATTERN.search(lowered):
        return RecurrenceRequirement("monthly", 1)
    return RecurrenceRequirement("unspecified", 1)


def _start_of_day(value: dt.datetime) -> dt.datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def adhoc_deadline(
    request: str,
    *,
    now: dt.datetime,
    default_deadline: dt.datetime,
) -> dt.datetime:
    """Derive the exclusive deadline implied by a one-off request."""
    lowered = request.lower()

    days = _NEXT_DAYS_PATTERN.search(lowered)
    if days:
        return now + dt.timedelta(days=max(1, _as_number(days.group(1))))
    if re.search(r"\btoday\b|\btonight\b", lowered):
        return _start_of_day(now) + dt.timedelta(days=1)
    if re.search(r"\btomorrow\b", lowered):
        return _start_of_day(now) + dt.timedelta(days=2)
    if re.search(r"\bthis\s+week\b", lowered):
        days_until_monday = 7 - now.weekday()
        return _start_of_day(now) + dt.timedelta(days=days_until_monday)
    if re.search(r"\bnext\s+week\b", lowered):
        return now + dt.timedelta(days=7)
    if re.search(r"\bthis\s+month\b", lowered):
        first = _start_of_day(now).replace(day=1)
        return (first + dt.timedelta(days=32)).replace(day=1)
    return default_deadline


def format_instant(value: dt.datetime, *, reference: Optional[dt.datetime] = None) -> str:
    if reference is not None and reference.tzinfo is not None:
        value = value.astimezone(reference.tzinfo)
    return value.isoformat(timespec="minutes")
