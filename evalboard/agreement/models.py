"""Data models for inter-evaluator agreement."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class AgreementLevel(str, Enum):
    """Agreement band used for highlighting criteria."""

    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


class AgreementStatus(str, Enum):
    """Whether agreement figures were computed at all."""

    COMPUTED = "computed"
    INSUFFICIENT_DATA = "insufficient_data"


class AgreementStats(BaseModel):
    """Dispersion of a set of scores and the derived agreement.

    agreement = max(0, 1 - stddev / mean); a heuristic proxy, not a
    reliability coefficient such as Cohen's kappa or ICC.
    """

    mean: float = Field(..., description="Arithmetic mean")
    variance: float = Field(..., description="Population variance", ge=0.0)
    stddev: float = Field(..., description="Population standard deviation", ge=0.0)
    coefficient_of_variation: float = Field(
        0.0, description="stddev / mean, 0 when mean <= 0", ge=0.0
    )
    agreement: float = Field(..., description="Agreement (0.0-1.0)", ge=0.0, le=1.0)


class CriterionAgreement(AgreementStats):
    """Agreement for one criterion across evaluators."""

    criterion_id: str = Field(..., description="Criterion identifier")
    criterion_name: str = Field(..., description="Criterion display name")
    scores: list[float] = Field(default_factory=list, description="Raw scores")
    level: AgreementLevel = Field(..., description="Agreement band")

    def to_dict(self) -> dict[str, Any]:
        return {
            "criterion_id": self.criterion_id,
            "criterion_name": self.criterion_name,
            "mean": round(self.mean, 4),
            "variance": round(self.variance, 4),
            "stddev": round(self.stddev, 4),
            "coefficient_of_variation": round(self.coefficient_of_variation, 4),
            "agreement": round(self.agreement, 4),
            "level": self.level.value,
            "n_scores": len(self.scores),
        }


class AgreementReport(BaseModel):
    """Agreement across all criteria of a session.

    ``criteria`` is sorted ascending by agreement so the most divergent
    criteria come first. When fewer than two evaluations exist the status
    is INSUFFICIENT_DATA and no figures are reported.
    """

    status: AgreementStatus
    evaluator_count: int = Field(..., ge=0)
    overall_agreement: float | None = Field(None, ge=0.0, le=1.0)
    criteria: list[CriterionAgreement] = Field(default_factory=list)

    @property
    def is_sufficient(self) -> bool:
        return self.status == AgreementStatus.COMPUTED

    @property
    def high_agreement_count(self) -> int:
        return sum(1 for c in self.criteria if c.level == AgreementLevel.HIGH)

    @property
    def low_agreement_count(self) -> int:
        return sum(1 for c in self.criteria if c.level == AgreementLevel.LOW)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "status": self.status.value,
            "evaluator_count": self.evaluator_count,
        }
        if self.is_sufficient and self.overall_agreement is not None:
            result["overall_agreement"] = round(self.overall_agreement, 4)
            result["high_agreement_count"] = self.high_agreement_count
            result["low_agreement_count"] = self.low_agreement_count
            result["criteria"] = [c.to_dict() for c in self.criteria]
        return result
