"""Evaluation pipeline for finished ECOS sessions."""

from .combiner import combine
from .criteria import criteria_or_fallback, normalize_criteria
from .errors import EvaluationError, InsufficientContentError
from .evidence import sample_evidence
from .gate import EvaluationStore, persist
from .grader import ChatModelGradingCapability, GradingCapability, GradingOrchestrator, match_grade
from .pipeline import EvaluationPipeline
from .report import read_report, ScenarioSource, TranscriptSource

__all__ = [
    "EvaluationPipeline",
    "normalize_criteria",
    "criteria_or_fallback",
    "sample_evidence",
    "GradingCapability",
    "ChatModelGradingCapability",
    "GradingOrchestrator",
    "match_grade",
    "combine",
    "EvaluationStore",
    "persist",
    "read_report",
    "ScenarioSource",
    "TranscriptSource",
    "EvaluationError",
    "InsufficientContentError",
]
