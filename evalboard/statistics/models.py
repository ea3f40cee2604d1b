"""Data models for score distributions."""

from typing import Any

from pydantic import BaseModel, Field


class DescriptiveStats(BaseModel):
    """Descriptive statistics of one criterion's scores."""

    mean: float = Field(..., description="Arithmetic mean")
    median: float = Field(..., description="Median value")
    min: float = Field(..., description="Minimum value")
    max: float = Field(..., description="Maximum value")
    variance: float = Field(..., description="Population variance", ge=0.0)
    stddev: float = Field(..., description="Population standard deviation", ge=0.0)
    count: int = Field(..., description="Number of scores", ge=1)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for reporting."""
        return {
            "mean": round(self.mean, 4),
            "median": round(self.median, 4),
            "min": round(self.min, 4),
            "max": round(self.max, 4),
            "variance": round(self.variance, 4),
            "stddev": round(self.stddev, 4),
            "count": self.count,
        }


class HistogramBin(BaseModel):
    """One fixed-width histogram bin; label is "{start}-{end}"."""

    label: str
    start: float
    end: float
    count: int = Field(0, ge=0)
    percentage: float = Field(0.0, description="count / total * 100", ge=0.0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "count": self.count,
            "percentage": round(self.percentage, 4),
        }


class CriterionDistribution(BaseModel):
    """Stats and histogram for the scores of one criterion."""

    criterion_id: str
    criterion_name: str
    stats: DescriptiveStats
    histogram: list[HistogramBin]

    @property
    def labels(self) -> list[str]:
        return [b.label for b in self.histogram]

    @property
    def counts(self) -> list[int]:
        return [b.count for b in self.histogram]

    def to_dict(self) -> dict[str, Any]:
        return {
            "criterion_id": self.criterion_id,
            "criterion_name": self.criterion_name,
            "stats": self.stats.to_dict(),
            "histogram": [b.to_dict() for b in self.histogram],
        }
