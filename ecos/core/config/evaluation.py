import pydantic as p

from .base import BaseSettings


class EvaluationSettings(BaseSettings):
    """Tuning of the session evaluation pipeline."""

    # score given to a criterion the grader did not score
    default_score: int = p.Field(default=2, ge=0)
    max_excerpts: int = p.Field(default=3, ge=1)
    excerpt_length: int = p.Field(default=220, ge=1, le=220)
