from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict

from llm.types import CalendarAction, CreateAction, MoveAction

from .types import OutcomeStatus, ReportEntry


@dataclass(frozen=True)
class RunReport:
    """Ordered recommendation/outcome pairs produced by one run."""

    entries: tuple[ReportEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def summary(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in OutcomeStatus}
        for entry in self.entries:
            counts[entry.outcome.status.value] += 1
        return counts

    @property
    def has_failures(self) -> bool:
        return any(entry.outcome.status is OutcomeStatus.FAILED for entry in self.entries)

    def format(self) -> str:
        if not self.entries:
            return "No scheduling recommendations."

        blocks: list[str] = []
        for index, entry in enumerate(self.entries, start=1):
            recommendation = entry.recommendation
            outcome = entry.outcome
            heading = (recommendation.category or recommendation.action.type.value).upper()
            status = outcome.status.value.upper()
            if outcome.reason:
                status += f" ({outcome.reason})"
            lines = [
                f"[{index}] {heading} (Priority: {recommendation.priority.value})",
                f"Recommendation: {recommendation.title}",
            ]
            if recommendation.description:
                lines.append(f"Details: {recommendation.description}")
            if recommendation.rationale:
                lines.append(f"Reason: {recommendation.rationale}")
            lines.append(
                "Action: " + json.dumps(_action_payload(recommendation.action), ensure_ascii=False)
            )
            lines.append(f"Outcome: {status}")
            blocks.append("\n".join(lines))

        totals = ", ".join(f"{count} {name}" for name, count in self.summary().items())
        blocks.append(f"Total: {len(self.entries)} recommendations ({totals})")
        return "\n\n".join(blocks)


def _action_payload(action: CalendarAction) -> Dict[str, Any]:
    if isinstance(action, CreateAction):
        payload = {
            "type": action.type.value,
            "title": action.title,
            "start": action.start.isoformat(),
            "end": action.end.isoformat(),
        }
        if action.description:
            payload["description"] = action.description
        return payload
    if isinstance(action, MoveAction):
        return {
            "type": action.type.value,
            "event_ref": action.event_ref,
            "start": action.new_start.isoformat(),
            "end": action.new_end.isoformat(),
        }
    return {"type": action.type.value, "event_ref": action.event_ref}
