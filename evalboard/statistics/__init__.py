"""Score distribution statistics."""

from .binner import DistributionBinner, format_number
from .models import CriterionDistribution, DescriptiveStats, HistogramBin

__all__ = [
    "CriterionDistribution",
    "DescriptiveStats",
    "DistributionBinner",
    "HistogramBin",
    "format_number",
]
