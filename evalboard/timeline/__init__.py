"""Comment timeline analysis."""

from .bucketizer import TimelineBucketizer, format_timestamp
from .models import Hotspot, IntervalSeries, TimelineSummary

__all__ = [
    "Hotspot",
    "IntervalSeries",
    "TimelineBucketizer",
    "TimelineSummary",
    "format_timestamp",
]
