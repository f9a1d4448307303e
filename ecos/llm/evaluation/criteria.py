"""Normalization of scenario evaluation criteria.

Criteria documents were authored by hand over several years and arrive in
several incompatible JSON shapes. Everything downstream works against
``CanonicalCriterion``; this module is the only place that knows about the
shapes.

Shapes are tried in priority order and the first one that recognizes the
document wins, even if it yields no criteria:

1. ``{"evaluation_criteria": [...]}``
2. ``[...]``
3. ``{"categories": [{"name": ..., "indicators": [...]}, ...]}``
4. ``{"criteria": [...]}``
5. ``{"<criterion key>": "<description>" | {...}, ...}``
"""

from __future__ import annotations

import logging
import math
import re as regex
import typing as t

import ecos.lib.json as json
from ecos.lib.util import round_half_up, strip_code_fences
from ecos.model import CanonicalCriterion

logger = logging.getLogger(__name__)

DEFAULT_MAX_SCORE = 4

FALLBACK_CRITERIA: tuple[CanonicalCriterion, ...] = (
    CanonicalCriterion(id="communication", name="Communication"),
    CanonicalCriterion(id="clinical_reasoning", name="Clinical Reasoning"),
    CanonicalCriterion(id="empathy", name="Empathy"),
    CanonicalCriterion(id="professionalism", name="Professionalism"),
)

# Field aliases, most preferred first. French names come from scenarios
# authored before the rubric editor existed.
IdAliases = ("id", "key", "name", "label")
NameAliases = ("name", "label", "id")
CategoryIdAliases = ("id", "name")
CategoryNameAliases = ("name", "id")
WeightAliases = ("weight", "poids")
IndicatorAliases = ("indicators", "elements")
MaxScoreAliases = ("maxScore", "max_score")

_Whitespace = regex.compile(r"\s+")

Record = dict[str, t.Any]
ShapeParser = t.Callable[[t.Any], "list[CanonicalCriterion] | None"]


def normalize_criteria(document: t.Any) -> list[CanonicalCriterion]:
    """Convert a raw criteria document into canonical criteria.

    Never raises: a document that is missing, unparseable or of an unknown
    shape yields an empty list.
    """
    try:
        document = _unwrap(document)
        for shape, parser in _Shapes:
            criteria = parser(document)
            if criteria is not None:
                logger.debug("normalized evaluation criteria", extra={"shape": shape, "count": len(criteria)})
                return _deduplicate_ids(criteria)
    except (TypeError, ValueError, AttributeError, ArithmeticError) as e:
        logger.warning("could not normalize evaluation criteria", extra={"error": str(e)})
        return []

    logger.debug("unrecognized evaluation criteria document", extra={"type": type(document).__name__})
    return []


def criteria_or_fallback(criteria: t.Sequence[CanonicalCriterion]) -> list[CanonicalCriterion]:
    """Substitute the generic four-criterion rubric for an empty criteria list."""
    if criteria:
        return list(criteria)
    logger.info("scenario has no usable evaluation criteria, using fallback rubric")
    return list(FALLBACK_CRITERIA)


# document unwrapping


def _unwrap(document: t.Any) -> t.Any:
    # criteria saved by the generator were sometimes stored as serialized text
    if isinstance(document, str):
        return _parse_text(document)

    if isinstance(document, dict):
        record = t.cast(Record, document)
        generated = record.get("generatedText")
        if isinstance(generated, str) and not isinstance(record.get("evaluation_criteria"), list):
            parsed = _parse_text(generated)
            if parsed is not None:
                return parsed
    return document


def _parse_text(text: str) -> t.Any:
    try:
        return json.loads(strip_code_fences(text))
    except ValueError:
        return None


# shape parsers; each returns None when the document is not of its shape


def _parse_evaluation_criteria(document: t.Any) -> list[CanonicalCriterion] | None:
    return _parse_field_array(document, "evaluation_criteria")


def _parse_array(document: t.Any) -> list[CanonicalCriterion] | None:
    if not isinstance(document, list):
        return None
    return _from_candidates(t.cast(list[t.Any], document))


def _parse_categories(document: t.Any) -> list[CanonicalCriterion] | None:
    if not isinstance(document, dict):
        return None
    categories = t.cast(Record, document).get("categories")
    if not isinstance(categories, list):
        return None

    criteria: list[CanonicalCriterion] = []
    for i, category in enumerate(t.cast(list[t.Any], categories)):
        if not isinstance(category, dict):
            continue
        record = t.cast(Record, category)
        indicators = resolve_indicators(record) or []
        description = _text(record.get("description")) or " ; ".join(indicators)
        criteria.append(
            CanonicalCriterion(
                id=_slug(first_present(record, CategoryIdAliases)) or f"category_{i}",
                name=_text(first_present(record, CategoryNameAliases)) or f"Category {i + 1}",
                description=description,
                max_score=resolve_max_score(record),
                weight=resolve_weight(record),
                indicators=indicators,
            )
        )
    return criteria


def _parse_criteria(document: t.Any) -> list[CanonicalCriterion] | None:
    return _parse_field_array(document, "criteria")


def _parse_keyed_object(document: t.Any) -> list[CanonicalCriterion] | None:
    if not isinstance(document, dict):
        return None

    criteria: list[CanonicalCriterion] = []
    for i, (key, value) in enumerate(t.cast(Record, document).items()):
        label = str(key).strip()
        if not label:
            continue
        record: Record = t.cast(Record, value) if isinstance(value, dict) else {}
        description = value if isinstance(value, str) else _text(record.get("description"))
        criteria.append(
            CanonicalCriterion(
                id=_slug(label) or f"crit_{i}",
                name=label[0].upper() + label[1:].replace("_", " "),
                description=description,
                max_score=resolve_max_score(record),
                weight=resolve_weight(record),
                indicators=resolve_indicators(record) or [],
            )
        )
    return criteria


_Shapes: tuple[tuple[str, ShapeParser], ...] = (
    ("evaluation_criteria", _parse_evaluation_criteria),
    ("array", _parse_array),
    ("categories", _parse_categories),
    ("criteria", _parse_criteria),
    ("keyed_object", _parse_keyed_object),
)


def _parse_field_array(document: t.Any, field: str) -> list[CanonicalCriterion] | None:
    if not isinstance(document, dict):
        return None
    candidates = t.cast(Record, document).get(field)
    if not isinstance(candidates, list):
        return None
    return _from_candidates(t.cast(list[t.Any], candidates))


def _from_candidates(candidates: list[t.Any]) -> list[CanonicalCriterion]:
    criteria: list[CanonicalCriterion] = []
    for i, candidate in enumerate(candidates):
        if isinstance(candidate, str) and candidate.strip():
            candidate = {"name": candidate.strip()}
        if not isinstance(candidate, dict):
            continue

        record = t.cast(Record, candidate)
        description = _text(record.get("description"))
        indicators = resolve_indicators(record)
        if indicators is None:
            indicators = [description] if description else []

        criteria.append(
            CanonicalCriterion(
                id=_slug(first_present(record, IdAliases)) or f"crit_{i}",
                name=_text(first_present(record, NameAliases)) or f"Criterion {i + 1}",
                description=description,
                max_score=resolve_max_score(record),
                weight=resolve_weight(record),
                indicators=indicators,
            )
        )
    return criteria


# alias resolution


def first_present(record: Record, aliases: t.Sequence[str]) -> t.Any:
    """Return the first truthy value among ``aliases``, or ``None``."""
    for alias in aliases:
        value = record.get(alias)
        if value:
            return value
    return None


def first_number(record: Record, aliases: t.Sequence[str]) -> float | None:
    """Return the first finite JSON number among ``aliases``, or ``None``.

    ``Infinity`` and ``NaN`` parse as floats but are skipped like any other
    non-number.
    """
    for alias in aliases:
        value = record.get(alias)
        if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
            return float(value)
    return None


def resolve_weight(record: Record) -> float | None:
    return first_number(record, WeightAliases)


def resolve_max_score(record: Record) -> int:
    value = first_number(record, MaxScoreAliases)
    if value is None:
        return DEFAULT_MAX_SCORE
    max_score = round_half_up(value)
    return max_score if max_score >= 1 else DEFAULT_MAX_SCORE


def resolve_indicators(record: Record) -> list[str] | None:
    """Flatten the first indicator list found, or ``None`` if there is none.

    Items may be plain strings or objects carrying a ``description`` or
    ``name``; blank items are dropped.
    """
    for alias in IndicatorAliases:
        items = record.get(alias)
        if not isinstance(items, list):
            continue
        indicators: list[str] = []
        for item in t.cast(list[t.Any], items):
            if isinstance(item, dict):
                item = first_present(t.cast(Record, item), ("description", "name"))
            text = _text(item)
            if text:
                indicators.append(text)
        return indicators
    return None


# helpers


def _text(value: t.Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def _slug(value: t.Any) -> str:
    return _Whitespace.sub("_", _text(value).lower())


def _deduplicate_ids(criteria: list[CanonicalCriterion]) -> list[CanonicalCriterion]:
    seen: set[str] = set()
    unique: list[CanonicalCriterion] = []
    for i, criterion in enumerate(criteria):
        cid = criterion.id
        suffix = i
        while cid in seen:
            cid = f"{criterion.id}_{suffix}"
            suffix += 1
        seen.add(cid)
        unique.append(criterion if cid == criterion.id else criterion.model_copy(update={"id": cid}))
    return unique
