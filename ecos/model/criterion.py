import pydantic as p

from .base import BaseModel


class CanonicalCriterion(BaseModel):
    """One evaluation dimension, independent of the shape it was authored in."""

    id: str = p.Field(min_length=1)
    name: str
    description: str = ""
    max_score: int = p.Field(default=4, ge=1, alias="maxScore")
    # None means the source document carried no usable weight
    weight: float | None = None
    indicators: list[str] = []
