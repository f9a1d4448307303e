__all__ = [
    # Base
    "BaseModel",
    # Enums
    "DeploymentEnvironment",
    # ID Types
    "EvaluationID",
    # Criteria
    "CanonicalCriterion",
    # Scenarios & sessions
    "Scenario",
    "EcosSession",
    "SessionContext",
    "session_scenario_id",
    # Transcripts
    "TranscriptMessage",
    # Grading
    "CriterionGrade",
    "OverallAssessment",
    "GradingResult",
    # Evaluation
    "EvidenceExcerpt",
    "CriterionResult",
    "EvaluationReport",
    "PersistOutcome",
    "StoredEvaluation",
    "StoredCriterion",
    "StoredReport",
]

from .base import BaseModel
from .criterion import CanonicalCriterion
from .enum import DeploymentEnvironment
from .evaluation import CriterionResult, EvaluationReport, EvidenceExcerpt, PersistOutcome, StoredCriterion, \
    StoredEvaluation, StoredReport
from .grading import CriterionGrade, GradingResult, OverallAssessment
from .id import EvaluationID
from .scenario import Scenario
from .session import EcosSession, session_scenario_id, SessionContext
from .transcript import TranscriptMessage
