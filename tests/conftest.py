"""Pytest fixtures for ECOS evaluation tests.

Storage tests run against an in-memory SQLite database created from the
table metadata. Each test runs within a transaction that is rolled back
after the test, so tests never see each other's rows.

Usage:
    def test_get_scenario(db_session: Session, scenario_factory):
        scenario = scenario_factory(title="Chest pain")

Async adapters run through run_async_db, which hands a coroutine function
an AsyncSession over a fresh in-memory aiosqlite database.
"""

from __future__ import annotations

import asyncio
import datetime
import os
import typing as t
from pathlib import Path

import pydantic as p
import pytest
import sqlalchemy
import sqlalchemy.event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

import ecos
from ecos.core import EcosContainer
from ecos.model import DeploymentEnvironment, EcosSession, Scenario, TranscriptMessage
from ecos.storage import message as message_storage
from ecos.storage import scenario as scenario_storage
from ecos.storage import session as session_storage
from ecos.storage.table import base

ROOT = Path(os.path.dirname(ecos.__file__)).parent

T = t.TypeVar("T")


@pytest.fixture(scope="session")
def engine() -> t.Generator[sqlalchemy.Engine]:
    """Create an in-memory SQLite engine with the schema in place.

    pysqlite manages transactions on its own and does not emit SAVEPOINT
    correctly; the two listeners hand transaction control back to
    SQLAlchemy so that nested session.begin() calls work as they do on
    PostgreSQL.
    """
    engine = sqlalchemy.create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @sqlalchemy.event.listens_for(engine, "connect")
    def do_connect(dbapi_connection: t.Any, _: t.Any) -> None:
        dbapi_connection.isolation_level = None

    @sqlalchemy.event.listens_for(engine, "begin")
    def do_begin(conn: sqlalchemy.Connection) -> None:
        conn.exec_driver_sql("BEGIN")

    base.metadata.create_all(engine)

    yield engine

    engine.dispose()


@pytest.fixture(scope="session")
def container(engine: sqlalchemy.Engine) -> t.Generator[EcosContainer]:
    """Boot the DI container for the test session.

    Uses the Test environment; the persistent engine is replaced with the
    SQLite engine so no database server is needed.
    """
    ct = EcosContainer()

    EcosContainer.boot(
        ct,
        debug=False,
        env=DeploymentEnvironment.Test,
        config_root=p.FileUrl(f"file://{ROOT}/config"),
        override=(),
    )
    ct.storage().persistent().engine.override(engine)

    yield ct

    ct.storage().persistent().engine.reset_override()
    ct.shutdown_resources()


@pytest.fixture
def db_session(engine: sqlalchemy.Engine) -> t.Generator[Session]:
    """Provide a database session wrapped in a transaction.

    Uses join_transaction_mode="create_savepoint" so that session.begin()
    creates savepoints instead of failing when already in a transaction.
    Code under test can open its own transactions while everything is
    still rolled back at the end.
    """
    connection = engine.connect()
    transaction = connection.begin()

    session = Session(
        bind=connection,
        autobegin=False,
        join_transaction_mode="create_savepoint",
    )

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def scenario_factory(db_session: Session) -> t.Callable[..., Scenario]:
    """Factory fixture for creating scenarios.

    Usage:
        def test_something(scenario_factory):
            scenario = scenario_factory(evaluation_criteria={"empathy": "..."})
    """

    def create_scenario(
        title: str = "Chest pain in a 55 year old man",
        description: str | None = None,
        evaluation_criteria: t.Any = None,
    ) -> Scenario:
        with db_session.begin():
            return scenario_storage.create(
                title=title,
                description=description,
                evaluation_criteria=evaluation_criteria,
                session=db_session,
            )

    return create_scenario


@pytest.fixture
def test_scenario(scenario_factory: t.Callable[..., Scenario]) -> Scenario:
    return scenario_factory(
        evaluation_criteria={
            "evaluation_criteria": [
                {"id": "history", "name": "History taking", "weight": 60, "indicators": ["Onset", "Character"]},
                {"id": "communication", "name": "Communication", "weight": 40},
            ]
        }
    )


@pytest.fixture
def ecos_session_factory(db_session: Session) -> t.Callable[..., EcosSession]:
    """Factory fixture for creating student sessions."""

    def create_session(
        session_id: str = "session_1_1700000000_abc",
        scenario_id: int | None = None,
        student_id: str | None = "student-42",
    ) -> EcosSession:
        with db_session.begin():
            return session_storage.create(
                session_id,
                scenario_id=scenario_id,
                student_id=student_id,
                session=db_session,
            )

    return create_session


@pytest.fixture
def transcript_factory(db_session: Session) -> t.Callable[..., tuple[TranscriptMessage, ...]]:
    """Factory fixture writing an alternating student/patient exchange.

    Messages get increasing creation times one second apart so that their
    order does not depend on insertion order.
    """

    def create_transcript(session_id: str, contents: t.Sequence[str]) -> tuple[TranscriptMessage, ...]:
        start = datetime.datetime(2024, 3, 1, 9, 0, 0)
        with db_session.begin():
            for i, content in enumerate(contents):
                message_storage.create(
                    session_id,
                    role="user" if i % 2 == 0 else "assistant",
                    content=content,
                    create_time=start + datetime.timedelta(seconds=i),
                    session=db_session,
                )
            return message_storage.find(session_id, session=db_session)

    return create_transcript


@pytest.fixture
def run_async_db() -> t.Callable[[t.Callable[[AsyncSession], t.Awaitable[T]]], T]:
    """Run a coroutine function against a fresh in-memory async database.

    Engine, schema and session all live within the one event loop that
    asyncio.run() creates, and are gone once it returns. Rows are seeded
    with the sync storage functions through AsyncSession.run_sync().

    Usage:
        async def check(session: AsyncSession) -> None:
            assert await scenario_storage.aget(1, session=session) is None

        run_async_db(check)
    """

    def run(fn: t.Callable[[AsyncSession], t.Awaitable[T]]) -> T:
        async def main() -> T:
            engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
            try:
                async with engine.begin() as conn:
                    await conn.run_sync(base.metadata.create_all)
                async with AsyncSession(engine, autobegin=False, expire_on_commit=False) as session:
                    return await fn(session)
            finally:
                await engine.dispose()

        return asyncio.run(main())

    return run
