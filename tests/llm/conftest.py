"""Fixtures for LLM tests."""

from __future__ import annotations

import os
import typing as t
from pathlib import Path
from unittest.mock import AsyncMock

import jinja2
import pytest

import ecos
from ecos.core.container.template import provide_llm_env
from ecos.model import CanonicalCriterion, EvaluationReport, StoredEvaluation, TranscriptMessage


@pytest.fixture(scope="session")
def llm_env() -> jinja2.Environment:
    """Provide the LLM Jinja2 environment over the packaged templates."""
    return provide_llm_env("ecos/templates/llm", root_path=Path(os.path.dirname(ecos.__file__)).parent)


@pytest.fixture
def capability() -> AsyncMock:
    """A grading capability whose ``complete`` is an AsyncMock."""
    mock = AsyncMock()
    mock.complete = AsyncMock(return_value="{}")
    return mock


@pytest.fixture
def criteria() -> list[CanonicalCriterion]:
    return [
        CanonicalCriterion(
            id="history",
            name="History taking",
            weight=60,
            indicators=["Asks about onset", "Asks about radiation"],
        ),
        CanonicalCriterion(id="communication", name="Communication", weight=40),
    ]


@pytest.fixture
def make_transcript() -> t.Callable[[int], list[TranscriptMessage]]:
    def make(n: int) -> list[TranscriptMessage]:
        return [
            TranscriptMessage(role="user" if i % 2 == 0 else "assistant", content=f"message {i}")
            for i in range(n)
        ]

    return make


class MemoryEvaluationStore(object):
    """Evaluation store keeping rows in a dict; ``fail`` makes every save raise."""

    def __init__(self, fail: Exception | None = None) -> None:
        self.fail = fail
        self.rows: dict[str, StoredEvaluation] = {}
        self.saves: list[str] = []

    async def save_evaluation(
        self,
        session_id: str,
        scenario_id: int | None,
        student_id: str | None,
        report: EvaluationReport,
    ) -> None:
        if self.fail is not None:
            raise self.fail
        self.saves.append(session_id)
        self.rows[session_id] = StoredEvaluation(
            session_id=session_id,
            scenario_id=scenario_id,
            student_id=student_id,
            overall_score_percent=report.overall_score_percent,
            llm_score_percent=report.llm_score_percent,
            weighted_score_percent=report.weighted_score_percent,
            scores=report.scores,
            strengths=report.strengths,
            weaknesses=report.weaknesses,
            recommendations=report.recommendations,
            summary=report.summary or None,
            criteria_details=[c.model_dump(mode="json") for c in report.criteria],
        )

    async def load_evaluation(self, session_id: str) -> StoredEvaluation | None:
        return self.rows.get(session_id)


@pytest.fixture
def store() -> MemoryEvaluationStore:
    return MemoryEvaluationStore()
