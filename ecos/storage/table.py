import datetime
import typing as t

from sqlalchemy import ForeignKey, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, MappedAsDataclass
from sqlalchemy.types import DateTime, Text

from ecos.model import EvaluationID

from .type import JSONDocument, ShortUUIDKeyType


class base(MappedAsDataclass, DeclarativeBase):
    type_annotation_map = {
        EvaluationID: ShortUUIDKeyType(EvaluationID),
        datetime.datetime: DateTime(timezone=True),
        list[str]: JSONDocument,
        dict[str, t.Any]: JSONDocument,
        list[dict[str, t.Any]]: JSONDocument,
    }


# Scenarios & sessions


class scenarios(base):
    __tablename__ = "scenarios"

    scenario_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True, init=False)
    title: Mapped[str]
    description: Mapped[str | None] = mapped_column(Text, default=None)
    # authored criteria document, kept as written; see ecos.llm.evaluation.criteria
    evaluation_criteria: Mapped[t.Any] = mapped_column(JSONDocument, nullable=True, default=None)
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
    update_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now(), onupdate=func.now())


class ecos_sessions(base):
    __tablename__ = "ecos_sessions"

    session_id: Mapped[str] = mapped_column(primary_key=True)
    scenario_id: Mapped[int | None] = mapped_column(ForeignKey("scenarios.scenario_id"), default=None)
    student_id: Mapped[str | None] = mapped_column(default=None)
    status: Mapped[str] = mapped_column(default="active")
    start_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
    end_time: Mapped[datetime.datetime | None] = mapped_column(default=None)


class ecos_messages(base):
    __tablename__ = "ecos_messages"

    message_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True, init=False)
    session_id: Mapped[str] = mapped_column(ForeignKey("ecos_sessions.session_id"), index=True)
    role: Mapped[str]
    content: Mapped[str | None] = mapped_column(Text, default=None)
    # text columns of the older question/response message layout
    question: Mapped[str | None] = mapped_column(Text, default=None)
    response: Mapped[str | None] = mapped_column(Text, default=None)
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())


# Evaluations


class evaluations(base):
    __tablename__ = "evaluations"

    evaluation_id: Mapped[EvaluationID] = mapped_column(primary_key=True)
    # one evaluation per session; re-grading overwrites it
    session_id: Mapped[str] = mapped_column(unique=True)
    scenario_id: Mapped[int | None] = mapped_column(default=None)
    student_id: Mapped[str | None] = mapped_column(default=None)
    overall_score_percent: Mapped[int] = mapped_column(default=0)
    llm_score_percent: Mapped[int | None] = mapped_column(default=None)
    weighted_score_percent: Mapped[int | None] = mapped_column(default=None)
    scores: Mapped[dict[str, t.Any]] = mapped_column(default_factory=dict)
    strengths: Mapped[list[str]] = mapped_column(default_factory=list)
    weaknesses: Mapped[list[str]] = mapped_column(default_factory=list)
    recommendations: Mapped[list[str]] = mapped_column(default_factory=list)
    summary: Mapped[str | None] = mapped_column(Text, default=None)
    feedback: Mapped[str | None] = mapped_column(Text, default=None)
    criteria_details: Mapped[list[dict[str, t.Any]]] = mapped_column(default_factory=list)
    evaluated_at: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
