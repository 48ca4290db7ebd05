"""Strict decoder for the oracle's recommendation payload.

The oracle output is untrusted: the top-level shape must match exactly or the
whole response is rejected, while individual elements that fail validation
are dropped and logged without affecting their neighbours.
"""

from __future__ import annotations

import datetime as dt
import json
import logging
import re
from typing import Any, Mapping, Optional

from .errors import MalformedOutputError, ValidationFailure
from .types import (
    ActionType,
    CalendarAction,
    CreateAction,
    DeleteAction,
    MoveAction,
    Recommendation,
    RecommendationPriority,
    ResponseShape,
)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.S)


class SuggestionParser:
    def __init__(
        self,
        *,
        prefix: str = "{",
        shape: Optional[ResponseShape] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._prefix = prefix
        self._shape = shape or ResponseShape()
        self._logger = logger or logging.getLogger(__name__)

    def parse(self, content: str) -> list[Recommendation]:
        elements = self._load_elements(content)

        recommendations: list[Recommendation] = []
        for index, element in enumerate(elements):
            try:
                recommendations.append(self._parse_element(index, element))
            except ValidationFailure as failure:
                self._logger.warning(
                    "Dropping recommendation %d (field %s): %s",
                    failure.index,
                    failure.field,
                    failure.message,
                )

        self._logger.info(
            "Parsed %d of %d recommendations",
            len(recommendations),
            len(elements),
        )
        return recommendations

    def _load_elements(self, content: str) -> list[Any]:
        text = (content or "").strip()
        fenced = _CODE_FENCE.match(text)
        if fenced:
            text = fenced.group(1).strip()
        if self._prefix and not text.startswith(self._prefix):
            text = self._prefix + text

        try:
            parsed = json.loads(text)
        except (ValueError, RecursionError) as error:
            raise MalformedOutputError(
                f"Oracle response is not valid JSON: {error}"
            ) from error

        if not isinstance(parsed, dict):
            raise MalformedOutputError("Oracle response must be a JSON object.")
        elements = parsed.get(self._shape.sequence_field)
        if not isinstance(elements, list):
            raise MalformedOutputError(
                f'Oracle response has no "{self._shape.sequence_field}" list.'
            )
        return elements

    def _parse_element(self, index: int, element: Any) -> Recommendation:
        if not isinstance(element, Mapping):
            raise ValidationFailure(index, "<element>", "must be an object")

        priority = _enum_value(
            RecommendationPriority,
            element.get("priority"),
            index=index,
            field="priority",
            transform=str.upper,
        )
        title = _optional_text(element.get("title"), index=index, field="title")
        description = _optional_text(
            element.get("description"),
            index=index,
            field="description",
        )
        rationale = _optional_text(
            element.get("rationale", element.get("reason")),
            index=index,
            field="rationale",
        )
        category = _optional_text(element.get("category"), index=index, field="category")

        raw_action = element.get("action")
        if not isinstance(raw_action, Mapping):
            raise ValidationFailure(index, "action", "must be an object")
        action = self._parse_action(index, raw_action, fallback_title=title)

        return Recommendation(
            priority=priority,
            title=title or _action_title(action),
            description=description,
            rationale=rationale,
            action=action,
            category=category or None,
        )

    def _parse_action(
        self,
        index: int,
        raw: Mapping[str, Any],
        *,
        fallback_title: str,
    ) -> CalendarAction:
        action_type = _enum_value(
            ActionType,
            raw.get("type"),
            index=index,
            field="action.type",
            transform=str.lower,
        )

        if action_type is ActionType.CREATE:
            title = _optional_text(raw.get("title"), index=index, field="action.title")
            title = title or fallback_title
            if not title:
                raise ValidationFailure(index, "action.title", "is required for create")
            start, end = _window(raw, index=index)
            return CreateAction(
                title=title,
                description=_optional_text(
                    raw.get("description"),
                    index=index,
                    field="action.description",
                ),
                start=start,
                end=end,
            )

        event_ref = _optional_text(
            raw.get("event_ref"),
            index=index,
            field="action.event_ref",
        )
        if not event_ref:
            raise ValidationFailure(
                index,
                "action.event_ref",
                f"is required for {action_type.value}",
            )
        if action_type is ActionType.MOVE:
            start, end = _window(raw, index=index)
            return MoveAction(event_ref=event_ref, new_start=start, new_end=end)
        return DeleteAction(event_ref=event_ref)


def _enum_value(enum_cls, value: Any, *, index: int, field: str, transform):
    if not isinstance(value, str) or not value.strip():
        raise ValidationFailure(index, field, "is required")
    try:
        return enum_cls(transform(value.strip()))
    except ValueError as error:
        raise ValidationFailure(index, field, f"unknown value {value!r}") from error


def _optional_text(value: Any, *, index: int, field: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationFailure(index, field, "must be a string")
    return value.strip()


def _window(raw: Mapping[str, Any], *, index: int) -> tuple[dt.datetime, dt.datetime]:
    start = _instant(raw.get("start"), index=index, field="action.start")
    end = _instant(raw.get("end"), index=index, field="action.end")
    if not start < end:
        raise ValidationFailure(index, "action.end", "must be after start")
    return start, end


def _instant(value: Any, *, index: int, field: str) -> dt.datetime:
    if not isinstance(value, str) or not value.strip():
        raise ValidationFailure(index, field, "is required")
    raw = value.strip()
    normalized = raw[:-1] + "+00:00" if raw.endswith(("Z", "z")) else raw
    try:
        parsed = dt.datetime.fromisoformat(normalized)
    except ValueError as error:
        raise ValidationFailure(index, field, f"invalid ISO-8601 value {raw!r}") from error
    if parsed.tzinfo is None:
        raise ValidationFailure(index, field, "must include a timezone offset")
    return parsed


def _action_title(action: CalendarAction) -> str:
    if isinstance(action, CreateAction):
        return action.title
    return action.event_ref
