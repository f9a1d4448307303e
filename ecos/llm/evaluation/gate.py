"""Persistence of finished evaluation reports."""

from __future__ import annotations

import logging
import typing as t

from ecos.model import EvaluationReport, PersistOutcome, SessionContext, StoredEvaluation

logger = logging.getLogger(__name__)


class EvaluationStore(t.Protocol):
    async def save_evaluation(
        self,
        session_id: str,
        scenario_id: int | None,
        student_id: str | None,
        report: EvaluationReport,
    ) -> None: ...

    async def load_evaluation(self, session_id: str) -> StoredEvaluation | None: ...


async def persist(report: EvaluationReport, context: SessionContext, store: EvaluationStore) -> PersistOutcome:
    """Store ``report`` for the session in ``context``.

    A storage failure does not lose the report: it is handed back unchanged
    with ``stored=False`` and the error text, so the caller can still show
    the student their result.
    """
    try:
        await store.save_evaluation(context.session_id, context.scenario_id, context.student_id, report)
    except Exception as e:  # storage backends raise driver-specific errors
        logger.error(
            "could not store evaluation",
            extra={"session_id": context.session_id, "error": str(e), "type": type(e).__name__},
        )
        return PersistOutcome(stored=False, report=report, error=str(e) or type(e).__name__)

    logger.info(
        "stored evaluation",
        extra={"session_id": context.session_id, "overall_score_percent": report.overall_score_percent},
    )
    return PersistOutcome(stored=True, report=report)
