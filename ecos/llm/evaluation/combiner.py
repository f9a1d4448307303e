"""Combination of canonical criteria, grader output and evidence into a report.

Everything here is pure: the same inputs always produce the same report.
"""

from __future__ import annotations

import math
import typing as t

from ecos.lib.util import round_half_up
from ecos.model import CanonicalCriterion, CriterionGrade, CriterionResult, EvaluationReport, EvidenceExcerpt, \
    GradingResult

from .grader import match_grade

DEFAULT_SCORE = 2
AGGREGATE_LIMIT = 3


class OrderedCap(object):
    """Collect strings in first-seen order, without repeats, up to a limit."""

    def __init__(self, limit: int = AGGREGATE_LIMIT) -> None:
        self.limit = limit
        self.items: list[str] = []

    def extend(self, values: t.Iterable[str]) -> t.Self:
        for value in values:
            if len(self.items) >= self.limit:
                break
            text = value.strip()
            if text and text not in self.items:
                self.items.append(text)
        return self

    def __iter__(self) -> t.Iterator[str]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def raw_weight(criterion: CanonicalCriterion) -> float:
    weight = criterion.weight
    if weight is None or not math.isfinite(weight) or weight <= 0:
        return 1.0
    return weight


def clamp_score(score: float, max_score: int) -> int:
    return round_half_up(min(max(score, 0.0), float(max_score)))


def combine(
    criteria: t.Sequence[CanonicalCriterion],
    grading: GradingResult | None,
    evidence: t.Sequence[EvidenceExcerpt],
    *,
    default_score: int = DEFAULT_SCORE,
) -> EvaluationReport:
    """Build the evaluation report.

    Criteria the grader did not score (or every criterion, when grading
    failed) receive ``default_score``. The overall percentage is the
    grader's own figure when it supplied one, else the weighted average of
    the criterion scores.
    """
    raw_weights = [raw_weight(c) for c in criteria]
    total_weight = sum(raw_weights)

    results: list[CriterionResult] = []
    for criterion, rw in zip(criteria, raw_weights):
        grade = match_grade(criterion, grading)
        score = _criterion_score(grade, criterion.max_score, default_score)
        results.append(
            CriterionResult(
                id=criterion.id,
                name=criterion.name,
                description=criterion.description,
                indicators=list(criterion.indicators),
                weight=round_half_up(rw / total_weight * 100, 2),
                raw_weight=rw,
                max_score=criterion.max_score,
                score=score,
                raw_score=score,
                strengths=grade.strengths if grade else [],
                weaknesses=grade.weaknesses if grade else [],
                actions=grade.actions if grade else [],
                justification=grade.justification if grade else "",
                evidence=list(evidence),
            )
        )

    weighted_score_percent = weighted_percent(results)
    overall = grading.overall_score_percent if grading else None
    if overall is not None:
        overall_score_percent = min(max(round_half_up(overall), 0), 100)
    else:
        overall_score_percent = weighted_score_percent

    assessment = grading.overall if grading else None
    strengths = OrderedCap().extend(assessment.strengths if assessment else [])
    weaknesses = OrderedCap().extend(assessment.weaknesses if assessment else [])
    recommendations = OrderedCap().extend(assessment.recommendations if assessment else [])
    for result in results:
        strengths.extend(result.strengths)
        weaknesses.extend(result.weaknesses)
        recommendations.extend(result.actions)

    return EvaluationReport(
        overall_score_percent=overall_score_percent,
        criteria=results,
        strengths=list(strengths),
        weaknesses=list(weaknesses),
        recommendations=list(recommendations),
        summary=assessment.summary if assessment else "",
        llm_score_percent=overall_score_percent,
        weighted_score_percent=weighted_score_percent,
    )


def weighted_percent(results: t.Sequence[CriterionResult]) -> int:
    """Weighted mean of ``score / maxScore`` as an integer percentage."""
    total_weight = sum(r.raw_weight for r in results)
    if not results or total_weight <= 0:
        return 0
    total = sum(r.score / r.max_score * r.raw_weight for r in results)
    return round_half_up(total / total_weight * 100)


def _criterion_score(grade: CriterionGrade | None, max_score: int, default_score: int) -> int:
    if grade is None or grade.score is None:
        return clamp_score(default_score, max_score)
    return clamp_score(grade.score, max_score)
