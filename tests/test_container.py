"""Tests for the booted EcosContainer."""

from __future__ import annotations

import json
import typing as t
from unittest.mock import AsyncMock

import jinja2
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from ecos.core import EcosContainer
from ecos.llm.evaluation import EvaluationPipeline
from ecos.model import DeploymentEnvironment, PersistOutcome, Scenario, SessionContext, StoredEvaluation, \
    TranscriptMessage


@pytest.fixture
def evaluation(container: EcosContainer) -> t.Generator[t.Any]:
    """The evaluation container with a mock grading capability."""
    capability = AsyncMock()
    capability.complete = AsyncMock(
        return_value=json.dumps({"criteria": [{"id": "history", "score": 4}], "overall_score_percent": 90})
    )
    ev = container.evaluation()
    ev.grading.override(capability)
    ev.grader.reset()

    yield ev

    ev.grader.reset()
    ev.grading.reset_last_overriding()


class TestBoot(object):
    def test_configuration(self, container: EcosContainer) -> None:
        """The Test environment configuration is loaded."""
        assert container.env() is DeploymentEnvironment.Test
        assert container.config.storage.persistent.postgresql.database() == "ecos_test"
        assert container.config.evaluation.default_score() == 2

    def test_llm_templates(self, container: EcosContainer) -> None:
        """Prompt templates resolve against the project root."""
        env = container.template().llm()

        assert isinstance(env, jinja2.Environment)
        assert env.get_template("evaluation/grade_session_system.j2") is not None


class TestEvaluationContainer(object):
    def test_pipeline_evaluates_and_stores(
        self,
        evaluation: t.Any,
        test_scenario: Scenario,
        run_async_db: t.Any,
    ) -> None:
        """The provided pipeline grades with the configured capability and writes through the async session."""
        transcript = [
            TranscriptMessage(role="user", content="When did the pain start?"),
            TranscriptMessage(role="assistant", content="Two hours ago."),
        ]
        context = SessionContext(session_id="session_1_1700000000_abc", scenario_id=test_scenario.scenario_id)

        async def evaluate(session: AsyncSession) -> tuple[PersistOutcome, StoredEvaluation | None]:
            evaluation.session.override(session)
            try:
                pipeline = evaluation.pipeline()
                assert isinstance(pipeline, EvaluationPipeline)
                assert pipeline.default_score == 2

                outcome = await pipeline.evaluate(context, test_scenario, transcript)
                return outcome, await evaluation.store().load_evaluation(context.session_id)
            finally:
                evaluation.session.reset_last_overriding()

        outcome, stored = run_async_db(evaluate)

        assert outcome.stored is True
        assert outcome.report.overall_score_percent == 90
        assert stored is not None
        assert stored.scores == {"history": 4, "communication": 2}

    def test_async_session_provider(self, container: EcosContainer) -> None:
        """Pipelines receive an async session over the async engine."""
        persistent = container.storage().persistent()

        session = persistent.async_session()

        assert isinstance(session, AsyncSession)
        assert session.bind is persistent.async_engine()
