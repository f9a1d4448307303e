"""Evaluation container: grader, stores and pipeline wired to configuration."""

from __future__ import annotations

import typing as t

import jinja2
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Dependency, Factory, Provider, Singleton
from sqlalchemy.ext.asyncio import AsyncSession

from ecos.llm.evaluation import EvaluationPipeline, GradingCapability, GradingOrchestrator

from ..config.evaluation import EvaluationSettings

if t.TYPE_CHECKING:
    from ecos.storage.evaluation import SQLEvaluationStore
    from ecos.storage.message import SQLTranscriptSource
    from ecos.storage.scenario import SQLScenarioSource


# ecos.storage imports ecos.core, so storage adapters are imported on first use
def provide_evaluation_store(session: AsyncSession) -> SQLEvaluationStore:
    from ecos.storage.evaluation import SQLEvaluationStore

    return SQLEvaluationStore(session)


def provide_scenario_source(session: AsyncSession) -> SQLScenarioSource:
    from ecos.storage.scenario import SQLScenarioSource

    return SQLScenarioSource(session)


def provide_transcript_source(session: AsyncSession) -> SQLTranscriptSource:
    from ecos.storage.message import SQLTranscriptSource

    return SQLTranscriptSource(session)


def provide_pipeline(
    grader: GradingOrchestrator, store: SQLEvaluationStore, settings: dict[str, t.Any]
) -> EvaluationPipeline:
    cf = EvaluationSettings.model_validate(settings)
    return EvaluationPipeline(
        grader,
        store,
        default_score=cf.default_score,
        max_excerpts=cf.max_excerpts,
        excerpt_length=cf.excerpt_length,
    )


class EvaluationContainer(DeclarativeContainer):
    config: Configuration = Configuration()
    grading: Provider[GradingCapability] = Dependency()
    env: Provider[jinja2.Environment] = Dependency()
    session: Provider[AsyncSession] = Dependency()

    grader: Provider[GradingOrchestrator] = Singleton(GradingOrchestrator, capability=grading, env=env)
    store: Provider[SQLEvaluationStore] = Factory(provide_evaluation_store, session=session)
    scenarios: Provider[SQLScenarioSource] = Factory(provide_scenario_source, session=session)
    transcripts: Provider[SQLTranscriptSource] = Factory(provide_transcript_source, session=session)
    pipeline: Provider[EvaluationPipeline] = Factory(provide_pipeline, grader=grader, store=store, settings=config)
