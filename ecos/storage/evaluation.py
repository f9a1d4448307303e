from __future__ import annotations

import datetime
import typing as t

import sqlalchemy as sqla

from ecos.core import di
from ecos.model import EvaluationID, EvaluationReport, StoredEvaluation

from . import AsyncSession, Session
from .table import evaluations


@t.overload
def get(
    session_id: str,
    *,
    session: Session = ...,
) -> StoredEvaluation | None: ...


@t.overload
def get(
    session_id: None = None,
    *,
    evaluation_id: EvaluationID,
    session: Session = ...,
) -> StoredEvaluation | None: ...


def get(
    session_id: str | None = None,
    *,
    evaluation_id: EvaluationID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> StoredEvaluation | None:
    """Get an evaluation by session id or evaluation id.

    Exactly one lookup key must be provided.
    """
    if session_id is not None:
        stmt = sqla.select(evaluations.__table__).where(evaluations.session_id == session_id)
    elif evaluation_id is not None:
        stmt = sqla.select(evaluations.__table__).where(evaluations.evaluation_id == evaluation_id)
    else:
        raise ValueError("exactly one of session_id or evaluation_id must be provided")

    row = session.execute(stmt).mappings().one_or_none()
    return StoredEvaluation(**row) if row else None


def upsert(
    *,
    session_id: str,
    report: EvaluationReport,
    scenario_id: int | None = None,
    student_id: str | None = None,
    evaluated_at: datetime.datetime | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> StoredEvaluation:
    """Write the evaluation of a session, replacing any earlier one."""
    values = _row_values(report, scenario_id, student_id, evaluated_at)
    existing = session.execute(_existing_stmt(session_id)).scalar_one_or_none()
    session.execute(_write_stmt(session_id, existing, values))
    session.flush()
    result = get(session_id, session=session)
    assert result is not None
    return result


# Async variants, used by the evaluation pipeline and the report reader


async def aget(
    session_id: str,
    *,
    session: AsyncSession = di.Provide["storage.persistent.async_session"],
) -> StoredEvaluation | None:
    """Get the evaluation of a session (async)."""
    stmt = sqla.select(evaluations.__table__).where(evaluations.session_id == session_id)
    row = (await session.execute(stmt)).mappings().one_or_none()
    return StoredEvaluation(**row) if row else None


async def aupsert(
    *,
    session_id: str,
    report: EvaluationReport,
    scenario_id: int | None = None,
    student_id: str | None = None,
    evaluated_at: datetime.datetime | None = None,
    session: AsyncSession = di.Provide["storage.persistent.async_session"],
) -> StoredEvaluation:
    """Write the evaluation of a session, replacing any earlier one (async)."""
    values = _row_values(report, scenario_id, student_id, evaluated_at)
    existing = (await session.execute(_existing_stmt(session_id))).scalar_one_or_none()
    await session.execute(_write_stmt(session_id, existing, values))
    await session.flush()
    result = await aget(session_id, session=session)
    assert result is not None
    return result


def _row_values(
    report: EvaluationReport,
    scenario_id: int | None,
    student_id: str | None,
    evaluated_at: datetime.datetime | None,
) -> dict[str, t.Any]:
    return {
        "scenario_id": scenario_id,
        "student_id": student_id,
        "overall_score_percent": report.overall_score_percent,
        "llm_score_percent": report.llm_score_percent,
        "weighted_score_percent": report.weighted_score_percent,
        "scores": report.scores,
        "strengths": report.strengths,
        "weaknesses": report.weaknesses,
        "recommendations": report.recommendations,
        "summary": report.summary or None,
        "criteria_details": [c.model_dump(mode="json") for c in report.criteria],
        "evaluated_at": evaluated_at if evaluated_at is not None else sqla.func.now(),
    }


def _existing_stmt(session_id: str) -> sqla.Select[tuple[EvaluationID]]:
    return sqla.select(evaluations.evaluation_id).where(evaluations.session_id == session_id)


def _write_stmt(session_id: str, existing: EvaluationID | None, values: dict[str, t.Any]) -> sqla.Executable:
    if existing is None:
        return sqla.insert(evaluations).values(evaluation_id=EvaluationID(), session_id=session_id, **values)
    return sqla.update(evaluations).where(evaluations.session_id == session_id).values(**values)


class SQLEvaluationStore(object):
    """Evaluation store over the ``evaluations`` table, one transaction per call."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save_evaluation(
        self,
        session_id: str,
        scenario_id: int | None,
        student_id: str | None,
        report: EvaluationReport,
    ) -> None:
        async with self.session.begin():
            await aupsert(
                session_id=session_id,
                scenario_id=scenario_id,
                student_id=student_id,
                report=report,
                session=self.session,
            )

    async def load_evaluation(self, session_id: str) -> StoredEvaluation | None:
        async with self.session.begin():
            return await aget(session_id, session=self.session)
