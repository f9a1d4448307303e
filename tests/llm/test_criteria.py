"""Tests for ecos.llm.evaluation.criteria module."""

from __future__ import annotations

import typing as t

import pytest

from ecos.llm.evaluation.criteria import criteria_or_fallback, FALLBACK_CRITERIA, normalize_criteria, \
    resolve_indicators, resolve_max_score, resolve_weight


class TestShapes(object):
    """Each authored shape normalizes to canonical criteria."""

    def test_evaluation_criteria_field(self) -> None:
        """An evaluation_criteria array is read entry by entry."""
        document = {
            "evaluation_criteria": [
                {"id": "hist", "name": "History", "weight": 2, "indicators": ["Onset", {"description": "Site"}, ""]},
                {"name": "Exam"},
            ]
        }

        criteria = normalize_criteria(document)

        assert [c.id for c in criteria] == ["hist", "exam"]
        assert criteria[0].name == "History"
        assert criteria[0].weight == 2.0
        assert criteria[0].indicators == ["Onset", "Site"]
        assert criteria[1].weight is None
        assert criteria[1].indicators == []

    def test_plain_array(self) -> None:
        """A bare array accepts French field names and plain strings."""
        document = [{"label": "Physical Exam", "poids": 3, "elements": ["Palpation"]}, "Empathy", 42]

        criteria = normalize_criteria(document)

        assert [c.id for c in criteria] == ["physical_exam", "empathy"]
        assert criteria[0].name == "Physical Exam"
        assert criteria[0].weight == 3.0
        assert criteria[0].indicators == ["Palpation"]
        assert criteria[1].name == "Empathy"

    def test_categories(self) -> None:
        """Categories become criteria, described by their indicators when undescribed."""
        document = {
            "categories": [
                {"name": "Anamnesis", "indicators": ["Onset", "Duration"]},
                {"id": "exam", "description": "Examines the abdomen"},
            ]
        }

        criteria = normalize_criteria(document)

        assert [c.id for c in criteria] == ["anamnesis", "exam"]
        assert criteria[0].description == "Onset ; Duration"
        assert criteria[0].indicators == ["Onset", "Duration"]
        assert criteria[1].name == "exam"
        assert criteria[1].description == "Examines the abdomen"

    def test_criteria_field(self) -> None:
        """A criteria array falls back to positional names and description indicators."""
        document = {"criteria": [{"key": "comm", "description": "Speaks clearly"}]}

        criteria = normalize_criteria(document)

        assert len(criteria) == 1
        assert criteria[0].id == "comm"
        assert criteria[0].name == "Criterion 1"
        assert criteria[0].indicators == ["Speaks clearly"]

    def test_keyed_object(self) -> None:
        """Weights that already sum to 100 are kept as authored."""
        document = {"communication": {"weight": 20, "elements": ["écoute active"]}, "examen": {"weight": 80}}

        criteria = normalize_criteria(document)

        assert [c.id for c in criteria] == ["communication", "examen"]
        assert [c.name for c in criteria] == ["Communication", "Examen"]
        assert [c.weight for c in criteria] == [20.0, 80.0]
        assert criteria[0].indicators == ["écoute active"]
        assert criteria[1].indicators == []

    def test_keyed_object_with_text_values(self) -> None:
        """A string value is the criterion's description."""
        criteria = normalize_criteria({"clinical_reasoning": "Builds a differential"})

        assert criteria[0].id == "clinical_reasoning"
        assert criteria[0].name == "Clinical reasoning"
        assert criteria[0].description == "Builds a differential"

    def test_evaluation_criteria_wins_over_other_keys(self) -> None:
        """The first recognized shape wins even when others are present."""
        document = {"evaluation_criteria": [{"id": "a"}], "criteria": [{"id": "b"}, {"id": "c"}]}

        assert [c.id for c in normalize_criteria(document)] == ["a"]

    @pytest.mark.parametrize(
        "document",
        [
            {"evaluation_criteria": [{"id": "a", "weight": 1}]},
            [{"id": "a", "weight": 1}],
            {"categories": [{"id": "a", "weight": 1}]},
            {"criteria": [{"id": "a", "weight": 1}]},
            {"a": {"weight": 1}},
        ],
    )
    def test_canonical_fields(self, document: t.Any) -> None:
        """Every shape yields a non-empty id, an integer max score and a numeric weight."""
        criteria = normalize_criteria(document)

        assert len(criteria) == 1
        assert criteria[0].id == "a"
        assert criteria[0].max_score == 4
        assert criteria[0].weight == 1.0


class TestUnwrapping(object):
    """Criteria stored as text are parsed before dispatch."""

    def test_serialized_document(self) -> None:
        """A JSON string is parsed as the document."""
        criteria = normalize_criteria('[{"id": "empathy", "name": "Empathy"}]')

        assert [c.id for c in criteria] == ["empathy"]

    def test_generated_text(self) -> None:
        """generatedText is parsed, with its code fence removed."""
        document = {"generatedText": '```json\n{"criteria": [{"id": "empathy"}]}\n```'}

        criteria = normalize_criteria(document)

        assert [c.id for c in criteria] == ["empathy"]

    def test_generated_text_ignored_next_to_evaluation_criteria(self) -> None:
        """An evaluation_criteria list takes precedence over generatedText."""
        document = {"generatedText": '[{"id": "other"}]', "evaluation_criteria": [{"id": "kept"}]}

        assert [c.id for c in normalize_criteria(document)] == ["kept"]


class TestUnrecognized(object):
    """Documents that carry no criteria normalize to nothing."""

    @pytest.mark.parametrize("document", [None, {}, [], "not json", 12, True])
    def test_empty_result(self, document: t.Any) -> None:
        """Missing, empty and unknown documents yield no criteria."""
        assert normalize_criteria(document) == []

    def test_fallback_substitutes_empty(self) -> None:
        """An empty list is replaced by the four generic criteria."""
        criteria = criteria_or_fallback(normalize_criteria(None))

        assert [c.id for c in criteria] == ["communication", "clinical_reasoning", "empathy", "professionalism"]
        assert all(c.max_score == 4 for c in criteria)

    def test_fallback_keeps_nonempty(self) -> None:
        """Usable criteria are passed through."""
        criteria = normalize_criteria({"empathy": "Shows empathy"})

        assert criteria_or_fallback(criteria) == criteria
        assert criteria_or_fallback(criteria) != list(FALLBACK_CRITERIA)


class TestIdCollisions(object):
    def test_colliding_ids_are_suffixed(self) -> None:
        """Repeated ids get their position appended."""
        criteria = normalize_criteria([{"id": "a"}, {"id": "a"}, {"id": "a"}])

        assert [c.id for c in criteria] == ["a", "a_1", "a_2"]

    def test_names_collapse_to_same_slug(self) -> None:
        """Names differing only in case and spacing still get distinct ids."""
        criteria = normalize_criteria([{"name": "Active Listening"}, {"name": "active listening"}])

        assert [c.id for c in criteria] == ["active_listening", "active_listening_1"]
        assert [c.name for c in criteria] == ["Active Listening", "active listening"]


class TestAliasResolution(object):
    """Tests for the per-field alias helpers."""

    def test_weight_prefers_first_number(self) -> None:
        """A non-numeric weight falls through to poids."""
        assert resolve_weight({"weight": "high", "poids": 5}) == 5.0
        assert resolve_weight({"weight": True}) is None
        assert resolve_weight({}) is None

    def test_max_score_defaults(self) -> None:
        """maxScore must be a number of at least 1."""
        assert resolve_max_score({"maxScore": 10}) == 10
        assert resolve_max_score({"max_score": 5}) == 5
        assert resolve_max_score({"maxScore": "ten"}) == 4
        assert resolve_max_score({"maxScore": 0}) == 4

    def test_indicators_flatten_objects(self) -> None:
        """Indicator objects contribute their description, else their name."""
        record = {"elements": [{"description": "Listens"}, {"name": "Summarizes"}, {}, None, "Reassures"]}

        assert resolve_indicators(record) == ["Listens", "Summarizes", "Reassures"]

    def test_indicators_absent(self) -> None:
        """No indicator list at all is distinguished from an empty one."""
        assert resolve_indicators({"indicators": "Listens"}) is None
        assert resolve_indicators({"indicators": []}) == []


class TestNonFiniteNumbers(object):
    """Infinity and NaN are valid to the JSON parser but never usable numbers."""

    def test_document_with_non_finite_max_scores(self) -> None:
        """Each criterion keeps the default max score and no sibling is lost."""
        document = '{"criteria": [{"name": "History", "maxScore": Infinity}, {"name": "Exam", "maxScore": NaN}]}'

        criteria = normalize_criteria(document)

        assert [c.id for c in criteria] == ["history", "exam"]
        assert [c.max_score for c in criteria] == [4, 4]

    def test_non_finite_weight_is_missing(self) -> None:
        """A non-finite weight falls through to the next alias, else counts as absent."""
        assert resolve_weight({"weight": float("inf")}) is None
        assert resolve_weight({"weight": float("nan"), "poids": 2}) == 2.0
        assert resolve_max_score({"maxScore": float("-inf")}) == 4
