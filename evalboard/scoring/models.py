"""Data models for score aggregation."""

from typing import Any

from pydantic import BaseModel, Field


class CategoryAverage(BaseModel):
    """Mean raw score for one category."""

    category_id: str = Field(..., description="Category identifier")
    name: str = Field("", description="Category display name")
    weight: float = Field(1.0, description="Display weight", ge=0.0)
    average: float = Field(..., description="Mean of raw scores, 0 if none")
    max_score: float = Field(
        ..., description="Largest maxValue among the category's criteria"
    )
    count: int = Field(0, description="Number of scores averaged", ge=0)

    @property
    def percentage(self) -> float:
        """Average as a percentage of max_score, 0 when max_score is 0."""
        return self.average / self.max_score * 100 if self.max_score else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "category_id": self.category_id,
            "name": self.name,
            "weight": self.weight,
            "average": round(self.average, 4),
            "max_score": self.max_score,
            "percentage": round(self.percentage, 4),
            "count": self.count,
        }


class EvaluatorScore(BaseModel):
    """Weighted total for one evaluator."""

    evaluation_id: str = Field(..., description="Evaluation identifier")
    evaluator_id: str = Field(..., description="User id of the evaluator")
    evaluator_name: str = Field(..., description="Display label of the evaluator")
    score: float = Field(..., description="Weighted total (0-100 for in-range data)")

    def to_dict(self) -> dict[str, Any]:
        return {
            "evaluation_id": self.evaluation_id,
            "evaluator_id": self.evaluator_id,
            "evaluator_name": self.evaluator_name,
            "score": round(self.score, 4),
        }


class CriterionAverage(BaseModel):
    """Mean raw score for one criterion id seen in the scores."""

    criterion_id: str
    name: str
    average: float
    max_value: float
    count: int = Field(..., ge=1)

    def to_dict(self) -> dict[str, Any]:
        return {
            "criterion_id": self.criterion_id,
            "name": self.name,
            "average": round(self.average, 4),
            "max_value": self.max_value,
            "count": self.count,
        }


class CategoryProfileEntry(BaseModel):
    """Normalized category average used for radar displays."""

    category_id: str
    name: str
    average: float
    max_score: float
    normalized: float = Field(..., description="average / max_score * 100")

    def to_dict(self) -> dict[str, Any]:
        return {
            "category_id": self.category_id,
            "name": self.name,
            "average": round(self.average, 4),
            "max_score": self.max_score,
            "normalized": round(self.normalized, 4),
        }


class SessionOverview(BaseModel):
    """Headline counts for a session."""

    total_evaluations: int = Field(..., ge=0)
    completed_evaluations: int = Field(..., ge=0)
    average_score: float = Field(..., description="Mean of all raw scores")

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_evaluations": self.total_evaluations,
            "completed_evaluations": self.completed_evaluations,
            "average_score": round(self.average_score, 4),
        }
