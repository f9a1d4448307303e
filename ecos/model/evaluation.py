from __future__ import annotations

import datetime
import typing as t

import pydantic as p

from ecos.lib.util import round_half_up

from .base import BaseModel
from .id import EvaluationID


class EvidenceExcerpt(BaseModel):  # Not generated by the grader, copied from the transcript
    role: str
    raw_role: str = p.Field(default="", alias="rawRole")
    excerpt: str = p.Field(default="", max_length=220)
    timestamp: str | None = None


class CriterionResult(BaseModel):
    id: str
    name: str
    description: str = ""
    indicators: list[str] = []
    weight: float
    raw_weight: float = p.Field(alias="rawWeight")
    max_score: int = p.Field(alias="maxScore")
    score: int
    raw_score: int = p.Field(alias="rawScore")
    strengths: list[str] = []
    weaknesses: list[str] = []
    actions: list[str] = []
    justification: str = ""
    evidence: list[EvidenceExcerpt] = []

    @property
    def percent(self) -> int:
        return round_half_up(self.score / self.max_score * 100)


class EvaluationReport(BaseModel):
    overall_score_percent: int = p.Field(ge=0, le=100, alias="overallScorePercent")
    criteria: list[CriterionResult]
    strengths: list[str] = []
    weaknesses: list[str] = []
    recommendations: list[str] = []
    summary: str = ""

    # both kept so an audit can spot disagreement between the grader's own
    # overall figure and the weighted recomputation
    llm_score_percent: int = p.Field(alias="llmScorePercent")
    weighted_score_percent: int = p.Field(alias="weightedScorePercent")

    @p.computed_field(alias="scores")
    @property
    def scores(self) -> dict[str, int]:
        return {c.id: c.score for c in self.criteria}

    @p.computed_field(alias="criteriaScores")
    @property
    def criteria_scores(self) -> dict[str, int]:
        return {c.id: c.percent for c in self.criteria}


class PersistOutcome(BaseModel):
    stored: bool
    report: EvaluationReport
    error: str | None = None


class StoredEvaluation(BaseModel):
    """An evaluation row as handed back by the storage collaborator."""

    evaluation_id: EvaluationID | None = None
    session_id: str
    scenario_id: int | None = None
    student_id: str | None = None

    overall_score_percent: int = 0
    llm_score_percent: int | None = None
    weighted_score_percent: int | None = None
    scores: dict[str, t.Any] = {}
    strengths: list[str] = []
    weaknesses: list[str] = []
    recommendations: list[str] = []
    summary: str | None = None
    feedback: str | None = None
    criteria_details: list[dict[str, t.Any]] = []

    evaluated_at: datetime.datetime | None = None


class StoredCriterion(BaseModel):
    id: str
    name: str
    score: int
    percent: int
    max_score: int = p.Field(alias="maxScore")
    weight: float | None = None
    strengths: list[str] = []
    weaknesses: list[str] = []
    actions: list[str] = []
    justification: str = ""
    indicators: list[str] = []
    evidence: list[EvidenceExcerpt] = []


class StoredReport(BaseModel):
    session_id: str = p.Field(alias="sessionId")
    scenario_title: str = p.Field(alias="scenarioTitle")
    overall_score: int = p.Field(alias="overallScore")
    criteria: list[StoredCriterion]
    strengths: list[str] = []
    weaknesses: list[str] = []
    recommendations: list[str] = []
    feedback: str | None = None
    transcript_message_count: int = p.Field(default=0, alias="transcriptMessageCount")
    summary: str
    generated_at: datetime.datetime | None = p.Field(default=None, alias="generatedAt")
