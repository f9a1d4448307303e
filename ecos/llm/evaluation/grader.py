"""Grading of a whole session transcript against the scenario rubric."""

from __future__ import annotations

import logging
import typing as t

import jinja2
import pydantic as p
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

import ecos.lib.json as json
from ecos.lib.logging import TRACE
from ecos.lib.util import strip_code_fences
from ecos.model import CanonicalCriterion, CriterionGrade, GradingResult, TranscriptMessage

from .criteria import DEFAULT_MAX_SCORE

logger = logging.getLogger(__name__)


class GradingCapability(t.Protocol):
    """Anything that can turn a system and a user prompt into response text."""

    async def complete(self, system_prompt: str, user_prompt: str) -> str: ...


class ChatModelGradingCapability(object):
    """Grading capability backed by a LangChain chat model."""

    def __init__(self, model: BaseChatModel) -> None:
        self.model = model

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        response = await self.model.ainvoke([
            SystemMessage(content=system_prompt),
            HumanMessage(content=user_prompt),
        ])
        return _get_content_str(response.content)


class GradingOrchestrator(object):
    """Ask the grading capability for one structured verdict per session.

    A single request covers every criterion. Failures of any kind (transport,
    malformed JSON, unexpected payload) are logged and reported as ``None`` so
    that the caller can still produce a report from default scores.
    """

    def __init__(self, capability: GradingCapability, env: jinja2.Environment) -> None:
        self.capability = capability
        self.env = env

    def render_prompts(
        self,
        scenario_title: str | None,
        criteria: t.Sequence[CanonicalCriterion],
        transcript: t.Sequence[TranscriptMessage],
    ) -> tuple[str, str]:
        system_prompt = self.env.get_template("evaluation/grade_session_system.j2").render(
            max_score=DEFAULT_MAX_SCORE,
        )
        user_prompt = self.env.get_template("evaluation/grade_session.j2").render(
            scenario_title=scenario_title,
            criteria=criteria,
            transcript=transcript,
        )
        return system_prompt, user_prompt

    async def grade(
        self,
        scenario_title: str | None,
        criteria: t.Sequence[CanonicalCriterion],
        transcript: t.Sequence[TranscriptMessage],
    ) -> GradingResult | None:
        system_prompt, user_prompt = self.render_prompts(scenario_title, criteria, transcript)
        logger.log(TRACE, "grading prompt", extra={"system": system_prompt, "user": user_prompt})

        try:
            text = await self.capability.complete(system_prompt, user_prompt)
        except Exception as e:  # provider errors have no common base class
            logger.warning("grading request failed", extra={"error": str(e), "type": type(e).__name__})
            return None
        logger.log(TRACE, "grading response", extra={"response": text})

        try:
            payload = json.loads(strip_code_fences(text))
            result = GradingResult.model_validate(payload)
        except (ValueError, p.ValidationError) as e:
            logger.warning(
                "could not parse grading response",
                extra={"error": str(e), "response": text[:500]},
            )
            return None

        logger.debug(
            "received grading result",
            extra={"criteria": len(result.criteria), "overall_score_percent": result.overall_score_percent},
        )
        return result


def match_grade(criterion: CanonicalCriterion, grading: GradingResult | None) -> CriterionGrade | None:
    """Find the grade for ``criterion``: by id first, then by name, ignoring case."""
    if grading is None:
        return None
    return grading.find(criterion.id, criterion.name)


def _get_content_str(content: t.Any) -> str:
    """Extract string content from a LangChain message content field."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for item in t.cast(list[t.Any], content):
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, dict) and isinstance(item.get("text"), str):
                parts.append(t.cast(dict[str, str], item)["text"])
        return "".join(parts)
    return str(content)
