"""Evaluation pipeline orchestrator."""

from __future__ import annotations

import asyncio
import collections
import contextlib
import logging
import typing as t

from ecos.model import PersistOutcome, Scenario, SessionContext, TranscriptMessage

from .combiner import combine, DEFAULT_SCORE
from .criteria import criteria_or_fallback, normalize_criteria
from .errors import InsufficientContentError
from .evidence import DEFAULT_MAX_EXCERPTS, EXCERPT_LENGTH, sample_evidence
from .gate import EvaluationStore, persist
from .grader import GradingOrchestrator

logger = logging.getLogger(__name__)


class EvaluationPipeline(object):
    """Evaluates one finished session end to end.

    The pipeline:
    1. Normalizes the scenario's criteria, falling back to a generic rubric
    2. Samples evidence excerpts from the transcript
    3. Asks the grader for a verdict on every criterion at once
    4. Combines criteria, verdict and evidence into a report
    5. Persists the report, keeping it even if storage fails

    Evaluations of the same session are serialized so that the last write
    always belongs to the last evaluation started.
    """

    def __init__(
        self,
        grader: GradingOrchestrator,
        store: EvaluationStore,
        *,
        default_score: int = DEFAULT_SCORE,
        max_excerpts: int = DEFAULT_MAX_EXCERPTS,
        excerpt_length: int = EXCERPT_LENGTH,
    ) -> None:
        self.grader = grader
        self.store = store
        self.default_score = default_score
        self.max_excerpts = max_excerpts
        self.excerpt_length = excerpt_length
        self._locks: dict[str, asyncio.Lock] = {}
        # evaluations holding or waiting on each session's lock
        self._holders: collections.Counter[str] = collections.Counter()

    async def evaluate(
        self,
        context: SessionContext,
        scenario: Scenario | None,
        transcript: t.Sequence[TranscriptMessage],
    ) -> PersistOutcome:
        if not transcript:
            raise InsufficientContentError(context.session_id, len(transcript))

        async with self.session_lock(context.session_id):
            criteria = criteria_or_fallback(normalize_criteria(scenario.evaluation_criteria if scenario else None))
            evidence = sample_evidence(transcript, self.max_excerpts, self.excerpt_length)

            logger.info(
                "evaluating session",
                extra={
                    "session_id": context.session_id,
                    "scenario_id": context.scenario_id,
                    "criteria": len(criteria),
                    "messages": len(transcript),
                },
            )

            grading = await self.grader.grade(scenario.title if scenario else None, criteria, transcript)
            if grading is None:
                logger.warning("grading unavailable, using default scores", extra={"session_id": context.session_id})

            report = combine(criteria, grading, evidence, default_score=self.default_score)
            return await persist(report, context, self.store)

    @contextlib.asynccontextmanager
    async def session_lock(self, session_id: str) -> t.AsyncIterator[None]:
        """Hold the lock of ``session_id``; it is discarded once nobody holds or awaits it."""
        lock = self._locks.setdefault(session_id, asyncio.Lock())
        self._holders[session_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._holders[session_id] -= 1
            if not self._holders[session_id]:
                del self._holders[session_id]
                del self._locks[session_id]
