from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from llm.types import Recommendation


class OutcomeStatus(str, Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ActionOutcome:
    status: OutcomeStatus
    reason: Optional[str] = None
    event_id: Optional[str] = None

    @classmethod
    def applied(cls, event_id: Optional[str] = None) -> "ActionOutcome":
        return cls(OutcomeStatus.APPLIED, event_id=event_id)

    @classmethod
    def skipped(cls, reason: str) -> "ActionOutcome":
        return cls(OutcomeStatus.SKIPPED, reason=reason)

    @classmethod
    def failed(cls, reason: str) -> "ActionOutcome":
        return cls(OutcomeStatus.FAILED, reason=reason)


@dataclass(frozen=True)
class ReportEntry:
    recommendation: Recommendation
    outcome: ActionOutcome
