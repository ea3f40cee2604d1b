"""Data models for comment timeline analysis."""

from typing import Any

from pydantic import BaseModel, Field


class IntervalSeries(BaseModel):
    """Comment counts per fixed-width time interval.

    ``labels``, ``starts`` and ``counts`` are parallel lists.
    """

    interval_size: int = Field(..., description="Interval width in seconds", ge=1)
    starts: list[int] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)
    counts: list[int] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "interval_size": self.interval_size,
            "labels": list(self.labels),
            "counts": list(self.counts),
        }


class Hotspot(BaseModel):
    """A short window with a concentration of comments."""

    start: float = Field(..., description="Window start in seconds", ge=0.0)
    time: str = Field(..., description="Window start as m:ss")
    count: int = Field(..., ge=1)

    def to_dict(self) -> dict[str, Any]:
        return {"time": self.time, "count": self.count}


class TimelineSummary(BaseModel):
    """Everything the timeline display needs for one session."""

    video_duration: float = Field(..., ge=0.0)
    total_comments: int = Field(..., ge=0)
    intervals: IntervalSeries
    average_per_interval: float = Field(..., ge=0.0)
    max_count: int = Field(..., ge=0)
    peak_intervals: list[str] = Field(default_factory=list)
    hotspots: list[Hotspot] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "video_duration": self.video_duration,
            "total_comments": self.total_comments,
            "intervals": self.intervals.to_dict(),
            "average_per_interval": round(self.average_per_interval, 4),
            "max_count": self.max_count,
            "peak_intervals": list(self.peak_intervals),
            "hotspots": [h.to_dict() for h in self.hotspots],
        }
