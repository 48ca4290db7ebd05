"""Apply recommendations to the live calendar with per-action isolation."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Callable, Optional, Sequence

from calendar_client.contracts import CalendarWriterLike
from llm.types import CreateAction, DeleteAction, MoveAction, Recommendation

from .types import ActionOutcome

NOT_SUPPORTED = "not supported"
UNKNOWN_ACTION = "unknown action type"
DRY_RUN = "dry run"


class ActionReconciler:
    """Turns each recommendation into exactly one :class:`ActionOutcome`.

    Creations are tagged with provenance so later runs can tell them apart
    from user-authored events. Move and delete are reported as skipped: the
    calendar writer does not offer them. Nothing is retried.
    """

    def __init__(
        self,
        writer: CalendarWriterLike,
        *,
        origin: str = "calendar-planner",
        dry_run: bool = False,
        logger: Optional[logging.Logger] = None,
        now_fn: Optional[Callable[[], dt.datetime]] = None,
    ):
        self._writer = writer
        self._origin = origin
        self._dry_run = dry_run
        self._logger = logger or logging.getLogger(__name__)
        self._now = now_fn or (lambda: dt.datetime.now().astimezone())

    def reconcile(self, recommendations: Sequence[Recommendation]) -> list[ActionOutcome]:
        outcomes: list[ActionOutcome] = []
        for index, recommendation in enumerate(recommendations):
            outcome = self._apply(recommendation)
            self._logger.info(
                "Recommendation %d (%s) -> %s%s",
                index,
                recommendation.title,
                outcome.status.value,
                f": {outcome.reason}" if outcome.reason else "",
            )
            outcomes.append(outcome)
        return outcomes

    def _apply(self, recommendation: Recommendation) -> ActionOutcome:
        if self._dry_run:
            return ActionOutcome.skipped(DRY_RUN)

        action = recommendation.action
        if isinstance(action, CreateAction):
            try:
                event_id = self._writer.create_event(
                    title=action.title,
                    start=action.start,
                    end=action.end,
                    description=action.description or None,
                    provenance=self._provenance(recommendation),
                )
            except Exception as error:
                self._logger.warning(
                    "Create failed for %r: %s",
                    action.title,
                    error,
                )
                return ActionOutcome.failed(str(error) or type(error).__name__)
            return ActionOutcome.applied(event_id)

        if isinstance(action, (MoveAction, DeleteAction)):
            return ActionOutcome.skipped(NOT_SUPPORTED)

        return ActionOutcome.skipped(UNKNOWN_ACTION)

    def _provenance(self, recommendation: Recommendation) -> dict[str, str]:
        return {
            "origin": self._origin,
            "priority": recommendation.priority.value,
            "created_at": self._now().isoformat(timespec="seconds"),
        }
