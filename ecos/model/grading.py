"""Structured output of the external grading capability.

Every field is optional: the grader is asked for a fixed JSON schema but is
not trusted to honor it, so values are coerced into safe defaults instead of
being rejected. Only a payload that is not a JSON object at all fails
validation.
"""

from __future__ import annotations

import math
import typing as t

import pydantic as p

from .base import BaseModel


def as_str_list(value: t.Any) -> list[str]:
    """Coerce a grader-supplied value to a list of non-blank strings."""
    if not value:
        return []
    items = t.cast(list[t.Any], value) if isinstance(value, list) else [value]
    return [str(item) for item in items if item is not None and str(item).strip()]


def as_number(value: t.Any) -> float | None:
    """Return ``value`` as a finite float, or ``None`` if it is not a JSON number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _first_present(data: dict[str, t.Any], *keys: str) -> t.Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


class CriterionGrade(BaseModel):
    id: str | None = None
    name: str | None = None
    score: float | None = None
    max_score: float | None = p.Field(default=None, alias="maxScore")
    strengths: list[str] = []
    weaknesses: list[str] = []
    actions: list[str] = []
    justification: str = ""

    @p.model_validator(mode="before")
    @classmethod
    def resolve_aliases(cls, data: t.Any) -> t.Any:
        if not isinstance(data, dict):
            return data
        entry = dict(t.cast(dict[str, t.Any], data))
        entry["score"] = _first_present(entry, "score", "note")
        entry["actions"] = _first_present(entry, "actions", "recommendations")
        entry.pop("note", None)
        entry.pop("recommendations", None)
        return entry

    @p.field_validator("id", "name", mode="before")
    @classmethod
    def coerce_label(cls, v: t.Any) -> str | None:
        if v is None or v == "":
            return None
        return str(v)

    @p.field_validator("score", mode="before")
    @classmethod
    def coerce_score(cls, v: t.Any) -> float | None:
        if v is None:
            return None
        if isinstance(v, str):
            try:
                v = float(v)
            except ValueError:
                return 0.0
        number = as_number(v)
        # a score that is present but unreadable counts as zero, not as missing
        return 0.0 if number is None else number

    @p.field_validator("max_score", mode="before")
    @classmethod
    def coerce_max_score(cls, v: t.Any) -> float | None:
        return as_number(v)

    @p.field_validator("strengths", "weaknesses", "actions", mode="before")
    @classmethod
    def coerce_lists(cls, v: t.Any) -> list[str]:
        return as_str_list(v)

    @p.field_validator("justification", mode="before")
    @classmethod
    def coerce_text(cls, v: t.Any) -> str:
        return str(v) if v else ""


class OverallAssessment(BaseModel):
    strengths: list[str] = []
    weaknesses: list[str] = []
    recommendations: list[str] = []
    summary: str = ""

    @p.model_validator(mode="before")
    @classmethod
    def resolve_aliases(cls, data: t.Any) -> t.Any:
        if not isinstance(data, dict):
            return {}
        section = dict(t.cast(dict[str, t.Any], data))
        section["summary"] = _first_present(section, "summary", "comment")
        section.pop("comment", None)
        return section

    @p.field_validator("strengths", "weaknesses", "recommendations", mode="before")
    @classmethod
    def coerce_lists(cls, v: t.Any) -> list[str]:
        return as_str_list(v)

    @p.field_validator("summary", mode="before")
    @classmethod
    def coerce_text(cls, v: t.Any) -> str:
        return str(v) if v else ""


class GradingResult(BaseModel):
    criteria: list[CriterionGrade] = []
    overall: OverallAssessment = OverallAssessment()
    overall_score_percent: float | None = None

    @p.model_validator(mode="before")
    @classmethod
    def lift_top_level_narrative(cls, data: t.Any) -> t.Any:
        if not isinstance(data, dict):
            return data
        payload = dict(t.cast(dict[str, t.Any], data))

        overall = payload.get("overall")
        section: dict[str, t.Any] = dict(t.cast(dict[str, t.Any], overall)) if isinstance(overall, dict) else {}
        # older prompts asked for the narrative fields at the top level
        for key in ("strengths", "weaknesses", "recommendations", "summary"):
            if not section.get(key) and payload.get(key):
                section[key] = payload[key]
        payload["overall"] = section
        return payload

    @p.field_validator("criteria", mode="before")
    @classmethod
    def keep_object_entries(cls, v: t.Any) -> list[dict[str, t.Any]]:
        if not isinstance(v, list):
            return []
        return [t.cast(dict[str, t.Any], e) for e in t.cast(list[t.Any], v) if isinstance(e, dict)]

    @p.field_validator("overall_score_percent", mode="before")
    @classmethod
    def coerce_percent(cls, v: t.Any) -> float | None:
        return as_number(v)

    def find(self, criterion_id: str, criterion_name: str) -> CriterionGrade | None:
        """Return the first grade matching a criterion by id, else by name."""
        for grade in self.criteria:
            if grade.id is not None and grade.id.lower() == criterion_id.lower():
                return grade
        for grade in self.criteria:
            if grade.name is not None and grade.name.lower() == criterion_name.lower():
                return grade
        return None
