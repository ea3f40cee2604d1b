"""Score aggregation for evaluation sessions."""

from .aggregator import ScoreAggregator
from .models import (
    CategoryAverage,
    CategoryProfileEntry,
    CriterionAverage,
    EvaluatorScore,
    SessionOverview,
)

__all__ = [
    "ScoreAggregator",
    "CategoryAverage",
    "CategoryProfileEntry",
    "CriterionAverage",
    "EvaluatorScore",
    "SessionOverview",
]
