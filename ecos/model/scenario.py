import typing as t

from .base import BaseModel


class Scenario(BaseModel):
    scenario_id: int
    title: str
    description: str | None = None

    # stored as authored; see ecos.llm.evaluation.criteria for the accepted shapes
    evaluation_criteria: t.Any = None
