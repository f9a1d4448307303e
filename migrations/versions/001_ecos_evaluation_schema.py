"""Scenarios, ECOS sessions, messages and evaluations

Revision ID: 001_initial
Revises:
Create Date: 2026-10-17

"""

import typing as t

from alembic import op
from sqlalchemy import func as f
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.schema import Column, ForeignKey
from sqlalchemy.types import DateTime, Integer, String, Text

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | t.Sequence[str] | None = None
depends_on: str | t.Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "scenarios",
        Column("scenario_id", Integer, primary_key=True, autoincrement=True),
        Column("title", String, nullable=False),
        Column("description", Text, nullable=True),
        Column("evaluation_criteria", JSONB, nullable=True),
        Column("create_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
        Column("update_time", DateTime(timezone=True), server_default=f.now(), onupdate=f.now(), nullable=False),
    )

    op.create_table(
        "ecos_sessions",
        Column("session_id", String, primary_key=True),
        Column("scenario_id", Integer, ForeignKey("scenarios.scenario_id"), nullable=True),
        Column("student_id", String, nullable=True),
        Column("status", String, nullable=False, server_default="active"),
        Column("start_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
        Column("end_time", DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "ecos_messages",
        Column("message_id", Integer, primary_key=True, autoincrement=True),
        Column("session_id", String, ForeignKey("ecos_sessions.session_id"), nullable=False, index=True),
        Column("role", String, nullable=False),
        Column("content", Text, nullable=True),
        Column("question", Text, nullable=True),
        Column("response", Text, nullable=True),
        Column("create_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
    )

    op.create_table(
        "evaluations",
        Column("evaluation_id", String(22), primary_key=True),
        Column("session_id", String, nullable=False, unique=True),
        Column("scenario_id", Integer, nullable=True),
        Column("student_id", String, nullable=True),
        Column("overall_score_percent", Integer, nullable=False, server_default="0"),
        Column("llm_score_percent", Integer, nullable=True),
        Column("weighted_score_percent", Integer, nullable=True),
        Column("scores", JSONB, nullable=False, server_default="{}"),
        Column("strengths", JSONB, nullable=False, server_default="[]"),
        Column("weaknesses", JSONB, nullable=False, server_default="[]"),
        Column("recommendations", JSONB, nullable=False, server_default="[]"),
        Column("summary", Text, nullable=True),
        Column("feedback", Text, nullable=True),
        Column("criteria_details", JSONB, nullable=False, server_default="[]"),
        Column("evaluated_at", DateTime(timezone=True), server_default=f.now(), nullable=False),
        Column("create_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
    )
    op.create_index("ix_evaluations_scenario_id", "evaluations", ["scenario_id"])


def downgrade() -> None:
    op.drop_index("ix_evaluations_scenario_id", table_name="evaluations")
    op.drop_table("evaluations")
    op.drop_table("ecos_messages")
    op.drop_table("ecos_sessions")
    op.drop_table("scenarios")
