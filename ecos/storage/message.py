from __future__ import annotations

import datetime
import typing as t

import sqlalchemy as sqla

from ecos.core import di
from ecos.model import TranscriptMessage

from . import AsyncSession, Session
from .table import ecos_messages


def find(
    session_id: str,
    *,
    limit: int | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[TranscriptMessage, ...]:
    """Messages of a session in the order they were exchanged."""
    rows = session.execute(_find_stmt(session_id, limit)).mappings().all()
    return tuple(TranscriptMessage.model_validate(dict(row)) for row in rows)


async def afind(
    session_id: str,
    *,
    limit: int | None = None,
    session: AsyncSession = di.Provide["storage.persistent.async_session"],
) -> tuple[TranscriptMessage, ...]:
    rows = (await session.execute(_find_stmt(session_id, limit))).mappings().all()
    return tuple(TranscriptMessage.model_validate(dict(row)) for row in rows)


def _find_stmt(session_id: str, limit: int | None) -> sqla.Select[t.Any]:
    stmt = (
        sqla
        .select(
            ecos_messages.role,
            ecos_messages.content,
            ecos_messages.question,
            ecos_messages.response,
            ecos_messages.create_time.label("created_at"),
        )
        .where(ecos_messages.session_id == session_id)
        .order_by(ecos_messages.create_time, ecos_messages.message_id)
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    return stmt


def create(
    session_id: str,
    *,
    role: str,
    content: str | None = None,
    question: str | None = None,
    response: str | None = None,
    create_time: datetime.datetime | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    values: dict[str, t.Any] = {
        "session_id": session_id,
        "role": role,
        "content": content,
        "question": question,
        "response": response,
    }
    if create_time is not None:
        values["create_time"] = create_time
    session.execute(sqla.insert(ecos_messages).values(**values))
    session.flush()


class SQLTranscriptSource(object):
    """Transcript lookups for the report reader and the CLI."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_transcript(self, session_id: str) -> list[TranscriptMessage]:
        async with self.session.begin():
            return list(await afind(session_id, session=self.session))
