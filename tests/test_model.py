"""Tests for ecos.model and ecos.lib.util helpers."""

from __future__ import annotations

import datetime

import pytest

from ecos.lib.util import round_half_up, strip_code_fences
from ecos.model import EvaluationID, GradingResult, session_scenario_id, TranscriptMessage


class TestSessionScenarioID(object):
    @pytest.mark.parametrize(
        "session_id,expected",
        [
            ("session_12_1700000000_abc", 12),
            ("session_0_1700000000_abc", None),
            ("session_abc_1700000000", None),
            ("a3f1c9e2", None),
            ("", None),
        ],
    )
    def test_parse(self, session_id: str, expected: int | None) -> None:
        assert session_scenario_id(session_id) == expected


class TestTranscriptMessage(object):
    def test_first_non_empty_content(self) -> None:
        """question, response and content are tried in that order."""
        message = TranscriptMessage.model_validate({"role": "user", "question": "", "response": None, "content": "Hi"})

        assert message.content == "Hi"
        assert message.is_student is True

    def test_datetime_timestamp(self) -> None:
        """A datetime timestamp is kept as ISO text."""
        message = TranscriptMessage.model_validate({
            "role": "assistant",
            "content": "Hello",
            "created_at": datetime.datetime(2024, 3, 1, 9, 30),
        })

        assert message.timestamp == "2024-03-01T09:30:00"
        assert message.speaker == "Patient"


class TestGradingResult(object):
    def test_top_level_narrative_lifted(self) -> None:
        """Narrative fields given at the top level fill the overall section."""
        result = GradingResult.model_validate({
            "strengths": ["Calm"],
            "summary": "Fine.",
            "overall": {"weaknesses": ["Rushed"]},
        })

        assert result.overall.strengths == ["Calm"]
        assert result.overall.weaknesses == ["Rushed"]
        assert result.overall.summary == "Fine."

    def test_missing_score_stays_missing(self) -> None:
        """An absent score is distinguished from an unreadable one."""
        result = GradingResult.model_validate({
            "criteria": [{"id": "a"}, {"id": "b", "score": None}, {"id": "c", "score": {}}],
        })

        assert [c.score for c in result.criteria] == [None, None, 0.0]


class TestEvaluationID(object):
    def test_generated(self) -> None:
        eid = EvaluationID()

        assert eid.startswith("eval$")
        assert len(eid.key) == 22
        assert EvaluationID(str(eid)) == eid
        assert EvaluationID(key=eid.key) == eid

    def test_rejects_other_prefix(self) -> None:
        with pytest.raises(ValueError):
            EvaluationID("user$" + EvaluationID().key)


class TestRoundHalfUp(object):
    @pytest.mark.parametrize("value,expected", [(2.5, 3), (3.5, 4), (87.5, 88), (-0.4, 0), (68.0, 68)])
    def test_integers(self, value: float, expected: int) -> None:
        assert round_half_up(value) == expected

    def test_digits(self) -> None:
        assert round_half_up(100 / 3, 2) == 33.33
        assert round_half_up(0.125, 2) == 0.13


class TestStripCodeFences(object):
    @pytest.mark.parametrize(
        "text",
        ['```json\n{"a": 1}\n```', '```\n{"a": 1}\n```', '  {"a": 1}  ', '```JSON{"a": 1}```'],
    )
    def test_strip(self, text: str) -> None:
        assert strip_code_fences(text) == '{"a": 1}'
