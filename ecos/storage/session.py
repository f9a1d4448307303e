from __future__ import annotations

import sqlalchemy as sqla

from ecos.core import di
from ecos.model import EcosSession

from . import Session
from .table import ecos_sessions


def get(session_id: str, *, session: Session = di.Provide["storage.persistent.session"]) -> EcosSession | None:
    stmt = sqla.select(ecos_sessions.__table__).where(ecos_sessions.session_id == session_id)
    row = session.execute(stmt).mappings().one_or_none()
    return EcosSession(**row) if row else None


def create(
    session_id: str,
    *,
    scenario_id: int | None = None,
    student_id: str | None = None,
    status: str = "active",
    session: Session = di.Provide["storage.persistent.session"],
) -> EcosSession:
    stmt = sqla.insert(ecos_sessions).values(
        session_id=session_id,
        scenario_id=scenario_id,
        student_id=student_id,
        status=status,
    )
    session.execute(stmt)
    session.flush()
    result = get(session_id, session=session)
    assert result is not None
    return result
