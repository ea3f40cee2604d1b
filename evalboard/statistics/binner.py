"""Descriptive statistics and histograms for criterion scores."""

import math
from collections.abc import Iterable, Sequence

from evalboard.core.exceptions import InvalidArgumentError
from evalboard.session.models import Criterion, EvaluationScore, index_by_id

from .models import CriterionDistribution, DescriptiveStats, HistogramBin

# At most this many histogram bins are built over [min, max]
MAX_BINS = 10


def format_number(value: float) -> str:
    """Render integral floats without a trailing ".0"."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


class DistributionBinner:
    """Summarizes the distribution of one criterion's scores.

    Bins have integer width ``max(1, ceil((max - min) / 10))`` and are
    built for every start from ``min`` to ``max``, so empty bins are
    still reported. Score domains are assumed integer or ordinal.
    """

    @staticmethod
    def calculate_median(values: Sequence[float]) -> float:
        """Calculate median value.

        Raises:
            InvalidArgumentError: If values is empty.
        """
        if not values:
            raise InvalidArgumentError("Cannot calculate median of empty sequence")

        sorted_values = sorted(values)
        n = len(sorted_values)
        mid = n // 2

        if n % 2 == 0:
            return (sorted_values[mid - 1] + sorted_values[mid]) / 2
        return sorted_values[mid]

    def compute_descriptive_stats(self, scores: Sequence[float]) -> DescriptiveStats:
        """Compute mean, median, extrema and population variance.

        Args:
            scores: Score values; callers report "no data" for empty input.

        Returns:
            DescriptiveStats for the scores.

        Raises:
            InvalidArgumentError: If scores is empty.
        """
        if not scores:
            raise InvalidArgumentError("Cannot compute statistics for empty sequence")

        n = len(scores)
        mean = sum(scores) / n
        variance = sum((x - mean) ** 2 for x in scores) / n

        return DescriptiveStats(
            mean=mean,
            median=self.calculate_median(scores),
            min=min(scores),
            max=max(scores),
            variance=variance,
            stddev=math.sqrt(variance),
            count=n,
        )

    @staticmethod
    def bin_size(min_value: float, max_value: float) -> int:
        """Width of each bin for the range [min_value, max_value]."""
        return max(1, math.ceil((max_value - min_value) / MAX_BINS))

    def compute_histogram(
        self,
        scores: Sequence[float],
        min_value: float,
        max_value: float,
    ) -> list[HistogramBin]:
        """Count scores into fixed-width bins over [min_value, max_value].

        Scores outside the range get their own bin at the matching start
        so that the counts always add up to ``len(scores)``. Bins are
        ordered by start value.

        Raises:
            InvalidArgumentError: If min_value > max_value or either bound
                is not finite.
        """
        if not (math.isfinite(min_value) and math.isfinite(max_value)):
            raise InvalidArgumentError("Histogram bounds must be finite")
        if min_value > max_value:
            raise InvalidArgumentError(
                f"Histogram min ({min_value}) cannot exceed max ({max_value})"
            )

        size = self.bin_size(min_value, max_value)

        def make_bin(start: float) -> HistogramBin:
            end = min(start + size - 1, max_value)
            return HistogramBin(
                label=f"{format_number(start)}-{format_number(end)}",
                start=start,
                end=end,
            )

        bins: dict[float, HistogramBin] = {}
        index = 0
        start = min_value
        while start <= max_value:
            bins[start] = make_bin(start)
            index += 1
            start = min_value + index * size

        for score in scores:
            start = min_value + math.floor((score - min_value) / size) * size
            if start not in bins:
                bins[start] = make_bin(start)
            bins[start].count += 1

        total = len(scores)
        ordered = sorted(bins.values(), key=lambda b: b.start)
        for b in ordered:
            b.percentage = b.count / total * 100 if total else 0.0
        return ordered

    def compute_criterion_distribution(
        self,
        scores: Iterable[EvaluationScore],
        criteria: Sequence[Criterion],
        criterion_id: str | None = None,
    ) -> CriterionDistribution | None:
        """Distribution of one criterion's scores over the observed range.

        Args:
            scores: Raw scores from any number of evaluations.
            criteria: Known criteria.
            criterion_id: Criterion to analyse; defaults to the first one.

        Returns:
            CriterionDistribution, or None when the criterion is unknown or
            has no scores.
        """
        target_id = criterion_id or (criteria[0].id if criteria else None)
        criterion = index_by_id(criteria).get(target_id) if target_id else None
        if criterion is None:
            return None

        values = [s.score for s in scores if s.criterion_id == criterion.id]
        if not values:
            return None

        stats = self.compute_descriptive_stats(values)
        return CriterionDistribution(
            criterion_id=criterion.id,
            criterion_name=criterion.name,
            stats=stats,
            histogram=self.compute_histogram(values, stats.min, stats.max),
        )
