"""Data models for assembled session reports."""

from typing import Any

from pydantic import BaseModel, Field

from evalboard.agreement.models import AgreementReport
from evalboard.scoring.models import (
    CategoryAverage,
    CategoryProfileEntry,
    CriterionAverage,
    EvaluatorScore,
    SessionOverview,
)
from evalboard.statistics.models import CriterionDistribution
from evalboard.timeline.models import TimelineSummary


class SessionReport(BaseModel):
    """All analytics for one session, ready for rendering or export.

    When the session has no evaluations ``has_data`` is False and only
    the overview is populated.
    """

    session_id: str = Field(..., description="Session identifier")
    session_name: str = Field("", description="Session display name")
    has_data: bool = Field(..., description="Whether any evaluation exists")
    overview: SessionOverview
    ranking: list[EvaluatorScore] = Field(default_factory=list)
    category_averages: list[CategoryAverage] = Field(default_factory=list)
    criterion_averages: list[CriterionAverage] = Field(default_factory=list)
    category_profile: list[CategoryProfileEntry] = Field(default_factory=list)
    agreement: AgreementReport | None = None
    distributions: list[CriterionDistribution] = Field(default_factory=list)
    timeline: TimelineSummary | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for reporting."""
        result: dict[str, Any] = {
            "session_id": self.session_id,
            "session_name": self.session_name,
            "has_data": self.has_data,
            "overview": self.overview.to_dict(),
        }
        if not self.has_data:
            return result

        result["ranking"] = [r.to_dict() for r in self.ranking]
        result["category_averages"] = [c.to_dict() for c in self.category_averages]
        result["criterion_averages"] = [c.to_dict() for c in self.criterion_averages]
        result["category_profile"] = [c.to_dict() for c in self.category_profile]
        if self.agreement:
            result["agreement"] = self.agreement.to_dict()
        result["distributions"] = [d.to_dict() for d in self.distributions]
        if self.timeline:
            result["timeline"] = self.timeline.to_dict()
        return result
