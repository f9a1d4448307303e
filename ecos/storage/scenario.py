from __future__ import annotations

import typing as t

import sqlalchemy as sqla

from ecos.core import di
from ecos.model import Scenario

from . import AsyncSession, Session
from .table import scenarios


def get(scenario_id: int, *, session: Session = di.Provide["storage.persistent.session"]) -> Scenario | None:
    stmt = sqla.select(scenarios.__table__).where(scenarios.scenario_id == scenario_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Scenario(**row) if row else None


async def aget(
    scenario_id: int, *, session: AsyncSession = di.Provide["storage.persistent.async_session"]
) -> Scenario | None:
    stmt = sqla.select(scenarios.__table__).where(scenarios.scenario_id == scenario_id)
    row = (await session.execute(stmt)).mappings().one_or_none()
    return Scenario(**row) if row else None


def create(
    *,
    title: str,
    description: str | None = None,
    evaluation_criteria: t.Any = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> Scenario:
    stmt = (
        sqla
        .insert(scenarios)
        .values(title=title, description=description, evaluation_criteria=evaluation_criteria)
        .returning(scenarios.scenario_id)
    )
    scenario_id = session.execute(stmt).scalar_one()
    session.flush()
    result = get(scenario_id, session=session)
    assert result is not None
    return result


class SQLScenarioSource(object):
    """Scenario lookups for the report reader, one transaction per call."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_scenario(self, scenario_id: int) -> Scenario | None:
        async with self.session.begin():
            return await aget(scenario_id, session=self.session)
