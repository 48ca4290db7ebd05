"""End-to-end recommendation run: snapshot, prompt, oracle, parse, reconcile."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Callable, Optional

from calendar_client.contracts import CalendarReaderLike
from calendar_client.snapshot import CalendarSnapshot, capture_snapshot
from llm.backends import SuggestionOracleLike
from llm.parser import SuggestionParser
from llm.request_builder import OracleRequestBuilder
from llm.types import Recommendation
from policy.model import PolicyModel

from .errors import PipelineStageError
from .reconciler import ActionReconciler
from .report import RunReport
from .types import ReportEntry

STAGE_SNAPSHOT = "snapshot"
STAGE_REQUEST = "request"
STAGE_ORACLE = "oracle"
STAGE_PARSE = "parse"
STAGE_RECONCILE = "reconcile"


class SchedulingPipeline:
    """Runs one planning pass.

    The snapshot is captured once before the oracle call and is not refreshed
    before reconciliation. Any failure before reconciliation aborts the run
    with :class:`PipelineStageError`; nothing is written in that case.
    """

    def __init__(
        self,
        policy: PolicyModel,
        reader: CalendarReaderLike,
        oracle: SuggestionOracleLike,
        reconciler: ActionReconciler,
        *,
        builder: Optional[OracleRequestBuilder] = None,
        parser: Optional[SuggestionParser] = None,
        lookback_days: int = 0,
        lookahead_days: int = 7,
        now_fn: Optional[Callable[[], dt.datetime]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._policy = policy
        self._reader = reader
        self._oracle = oracle
        self._reconciler = reconciler
        self._builder = builder or OracleRequestBuilder(lookahead_days=lookahead_days)
        self._parser = parser or SuggestionParser(
            prefix=self._builder.response_prefix,
            shape=self._builder.response_shape,
        )
        self._lookback_days = lookback_days
        self._lookahead_days = lookahead_days
        self._now = now_fn or (lambda: dt.datetime.now().astimezone())
        self._logger = logger or logging.getLogger("scheduler")

    def run(self) -> RunReport:
        now = self._now()

        snapshot: CalendarSnapshot = self._stage(
            STAGE_SNAPSHOT,
            lambda: capture_snapshot(
                self._reader,
                now=now,
                lookback_days=self._lookback_days,
                lookahead_days=self._lookahead_days,
                logger=self._logger.getChild("snapshot"),
            ),
        )
        request = self._stage(
            STAGE_REQUEST,
            lambda: self._builder.build(self._policy, snapshot, now),
        )
        self._logger.debug("Oracle prompt:\n%s", request.prompt)

        self._logger.info("Requesting scheduling suggestions...")
        raw = self._stage(
            STAGE_ORACLE,
            lambda: self._oracle.complete(request.prompt, prefix=request.response_prefix),
        )
        self._logger.debug("Oracle raw response: %s", raw)

        recommendations: list[Recommendation] = self._stage(
            STAGE_PARSE,
            lambda: self._parser.parse(raw),
        )
        outcomes = self._stage(
            STAGE_RECONCILE,
            lambda: self._reconciler.reconcile(recommendations),
        )
        report = RunReport(
            entries=tuple(
                ReportEntry(recommendation=recommendation, outcome=outcome)
                for recommendation, outcome in zip(recommendations, outcomes)
            )
        )
        self._logger.info("Run complete: %s", report.summary())
        return report

    def _stage(self, name: str, action):
        try:
            return action()
        except PipelineStageError:
            raise
        except Exception as error:
            self._logger.error("%s stage failed: %s", name, error)
            raise PipelineStageError(name, error) from error
