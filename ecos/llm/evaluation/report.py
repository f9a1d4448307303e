"""Read-side projection of stored evaluations."""

from __future__ import annotations

import logging
import typing as t

from ecos.lib.util import round_half_up
from ecos.model import EvidenceExcerpt, Scenario, session_scenario_id, StoredCriterion, StoredEvaluation, \
    StoredReport, TranscriptMessage
from ecos.model.grading import as_number, as_str_list

from .criteria import DEFAULT_MAX_SCORE
from .gate import EvaluationStore

logger = logging.getLogger(__name__)

UNKNOWN_SCENARIO = "Unknown scenario"


class ScenarioSource(t.Protocol):
    async def get_scenario(self, scenario_id: int) -> Scenario | None: ...


class TranscriptSource(t.Protocol):
    async def get_transcript(self, session_id: str) -> list[TranscriptMessage]: ...


async def read_report(
    session_id: str,
    *,
    store: EvaluationStore,
    scenarios: ScenarioSource,
    transcripts: TranscriptSource | None = None,
) -> StoredReport | None:
    """Rebuild the report shown to a student from what was stored.

    Scores and narrative come from the stored row only; the grader is never
    consulted again. The scenario title is looked up live and the transcript
    is only counted.
    """
    evaluation = await store.load_evaluation(session_id)
    if evaluation is None:
        return None

    scenario_title = await _scenario_title(evaluation, scenarios)
    message_count = len(await transcripts.get_transcript(session_id)) if transcripts is not None else 0

    return StoredReport(
        session_id=session_id,
        scenario_title=scenario_title,
        overall_score=evaluation.overall_score_percent,
        criteria=stored_criteria(evaluation),
        strengths=evaluation.strengths,
        weaknesses=evaluation.weaknesses,
        recommendations=evaluation.recommendations,
        feedback=evaluation.feedback or None,
        transcript_message_count=message_count,
        summary=evaluation.summary or default_summary(scenario_title, message_count),
        generated_at=evaluation.evaluated_at,
    )


def stored_criteria(evaluation: StoredEvaluation) -> list[StoredCriterion]:
    """Rebuild per-criterion results from the score map and the detail blob.

    Every key of the score map yields a criterion, with or without a detail
    entry; detail entries missing from the score map are appended after.
    """
    details: dict[str, dict[str, t.Any]] = {}
    for detail in evaluation.criteria_details:
        cid = str(detail.get("id") or "")
        if cid and cid not in details:
            details[cid] = detail

    criteria: list[StoredCriterion] = []
    for cid, value in evaluation.scores.items():
        criteria.append(_stored_criterion(cid, value, details.get(cid, {})))
    for cid, detail in details.items():
        if cid not in evaluation.scores:
            criteria.append(_stored_criterion(cid, detail.get("score"), detail))
    return criteria


def default_summary(scenario_title: str, message_count: int) -> str:
    plural = "s" if message_count > 1 else ""
    return f'Evaluation of scenario "{scenario_title}" based on {message_count} patient/student exchange{plural}.'


async def _scenario_title(evaluation: StoredEvaluation, scenarios: ScenarioSource) -> str:
    scenario_id = evaluation.scenario_id or session_scenario_id(evaluation.session_id)
    if scenario_id is None:
        return UNKNOWN_SCENARIO

    try:
        scenario = await scenarios.get_scenario(scenario_id)
    except Exception as e:  # a missing title must not hide the report
        logger.warning(
            "could not load scenario for evaluation report",
            extra={"session_id": evaluation.session_id, "scenario_id": scenario_id, "error": str(e)},
        )
        return UNKNOWN_SCENARIO
    return scenario.title if scenario is not None else UNKNOWN_SCENARIO


def _stored_criterion(cid: str, value: t.Any, detail: dict[str, t.Any]) -> StoredCriterion:
    score = round_half_up(as_number(value) or 0.0)
    max_score = as_number(detail.get("maxScore", detail.get("max_score")))
    max_score = round_half_up(max_score) if max_score and max_score >= 1 else DEFAULT_MAX_SCORE

    return StoredCriterion(
        id=cid,
        name=str(detail.get("name") or _title_from_id(cid)),
        score=score,
        percent=round_half_up(score / max_score * 100),
        max_score=max_score,
        weight=as_number(detail.get("weight")),
        strengths=as_str_list(detail.get("strengths")),
        weaknesses=as_str_list(detail.get("weaknesses")),
        actions=as_str_list(detail.get("actions")),
        justification=str(detail.get("justification") or ""),
        indicators=as_str_list(detail.get("indicators")),
        evidence=_stored_evidence(detail.get("evidence")),
    )


def _stored_evidence(value: t.Any) -> list[EvidenceExcerpt]:
    if not isinstance(value, list):
        return []
    return [EvidenceExcerpt.model_validate(e) for e in t.cast(list[t.Any], value) if isinstance(e, dict)]


def _title_from_id(cid: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in cid.replace("_", " ").split())
