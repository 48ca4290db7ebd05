"""Typed payloads shared by the request builder, parser, and reconciler."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class RecommendationPriority(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ActionType(str, Enum):
    CREATE = "create"
    MOVE = "move"
    DELETE = "delete"


@dataclass(frozen=True)
class CreateAction:
    title: str
    description: str
    start: dt.datetime
    end: dt.datetime
    type: ActionType = field(default=ActionType.CREATE, init=False)


@dataclass(frozen=True)
class MoveAction:
    event_ref: str
    new_start: dt.datetime
    new_end: dt.datetime
    type: ActionType = field(default=ActionType.MOVE, init=False)


@dataclass(frozen=True)
class DeleteAction:
    event_ref: str
    type: ActionType = field(default=ActionType.DELETE, init=False)


CalendarAction = Union[CreateAction, MoveAction, DeleteAction]


@dataclass(frozen=True)
class Recommendation:
    """One proposed calendar change; ``rationale`` is kept for auditing only."""

    priority: RecommendationPriority
    title: str
    description: str
    rationale: str
    action: CalendarAction
    category: Optional[str] = None


@dataclass(frozen=True)
class ResponseShape:
    """Expected top-level structure of the oracle's JSON answer."""

    sequence_field: str = "recommendations"
    priorities: tuple[str, ...] = tuple(item.value for item in RecommendationPriority)
    action_types: tuple[str, ...] = tuple(item.value for item in ActionType)


@dataclass(frozen=True)
class OracleRequest:
    prompt: str
    response_prefix: str
    response_shape: ResponseShape
