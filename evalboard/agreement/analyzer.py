"""Inter-evaluator agreement analysis."""

import math
from collections.abc import Iterable, Sequence

from evalboard.core.exceptions import InvalidArgumentError
from evalboard.core.logging import get_logger
from evalboard.session.models import Criterion, Evaluation

from .models import (
    AgreementLevel,
    AgreementReport,
    AgreementStats,
    AgreementStatus,
    CriterionAgreement,
)

logger = get_logger(__name__)

HIGH_AGREEMENT_THRESHOLD = 0.8
MODERATE_AGREEMENT_THRESHOLD = 0.6

# Fewer evaluations than this makes agreement meaningless
MIN_EVALUATORS = 2


class AgreementAnalyzer:
    """Measures how closely evaluators agree on each criterion.

    Per criterion:
    - mean and population variance (divided by n) of the raw scores
    - coefficient of variation = stddev / mean (0 when mean <= 0)
    - agreement = max(0, 1 - coefficient of variation)

    Fewer than two scores for a criterion counts as perfect agreement.
    Overall agreement is the unweighted mean over criteria.
    """

    def __init__(
        self,
        high_threshold: float = HIGH_AGREEMENT_THRESHOLD,
        moderate_threshold: float = MODERATE_AGREEMENT_THRESHOLD,
    ) -> None:
        """Initialize the analyzer.

        Args:
            high_threshold: Minimum agreement classified as HIGH.
            moderate_threshold: Minimum agreement classified as MODERATE.

        Raises:
            InvalidArgumentError: If thresholds are outside [0, 1] or
                moderate_threshold exceeds high_threshold.
        """
        if not 0.0 <= moderate_threshold <= high_threshold <= 1.0:
            raise InvalidArgumentError(
                "Agreement thresholds must satisfy "
                f"0 <= moderate ({moderate_threshold}) <= high ({high_threshold}) <= 1"
            )
        self.high_threshold = high_threshold
        self.moderate_threshold = moderate_threshold

    def classify(self, agreement: float) -> AgreementLevel:
        """Map an agreement value to its band."""
        if agreement >= self.high_threshold:
            return AgreementLevel.HIGH
        if agreement >= self.moderate_threshold:
            return AgreementLevel.MODERATE
        return AgreementLevel.LOW

    @staticmethod
    def compute_criterion_agreement(scores: Sequence[float]) -> AgreementStats:
        """Compute dispersion and agreement for one criterion's scores.

        Args:
            scores: Raw scores given by each evaluator.

        Returns:
            AgreementStats. With fewer than two scores: mean is the single
            score (or 0), variance and stddev are 0, agreement is 1.
        """
        n = len(scores)
        if n < 2:
            return AgreementStats(
                mean=scores[0] if scores else 0.0,
                variance=0.0,
                stddev=0.0,
                coefficient_of_variation=0.0,
                agreement=1.0,
            )

        mean = sum(scores) / n
        variance = sum((x - mean) ** 2 for x in scores) / n
        stddev = math.sqrt(variance)
        cv = stddev / mean if mean > 0 else 0.0

        return AgreementStats(
            mean=mean,
            variance=variance,
            stddev=stddev,
            coefficient_of_variation=cv,
            agreement=max(0.0, 1.0 - cv),
        )

    @staticmethod
    def compute_overall_agreement(agreements: Iterable[AgreementStats]) -> float:
        """Unweighted mean of per-criterion agreement.

        Criterion weights are ignored. An empty input yields
        1.0, consistent with treating missing data as agreement.
        """
        values = [a.agreement for a in agreements]
        if not values:
            return 1.0
        return sum(values) / len(values)

    def compute_agreement_table(
        self,
        evaluations: Sequence[Evaluation],
        criteria: Iterable[Criterion],
    ) -> list[CriterionAgreement]:
        """Compute agreement for every criterion, least agreement first.

        Evaluations without a score for a criterion are left out of that
        criterion's sample. Ties keep criteria order.
        """
        table = []
        for criterion in criteria:
            scores = [
                score
                for score in (e.score_for(criterion.id) for e in evaluations)
                if score is not None
            ]
            stats = self.compute_criterion_agreement(scores)
            table.append(
                CriterionAgreement(
                    criterion_id=criterion.id,
                    criterion_name=criterion.name,
                    scores=scores,
                    level=self.classify(stats.agreement),
                    **stats.model_dump(),
                )
            )

        return sorted(table, key=lambda record: record.agreement)

    def analyze(
        self,
        evaluations: Sequence[Evaluation],
        criteria: Iterable[Criterion],
    ) -> AgreementReport:
        """Build the full agreement report for a session.

        Returns an INSUFFICIENT_DATA report, without figures, when fewer
        than two evaluations were supplied.
        """
        if len(evaluations) < MIN_EVALUATORS:
            logger.debug("agreement_insufficient_data", evaluations=len(evaluations))
            return AgreementReport(
                status=AgreementStatus.INSUFFICIENT_DATA,
                evaluator_count=len(evaluations),
            )

        table = self.compute_agreement_table(evaluations, criteria)
        return AgreementReport(
            status=AgreementStatus.COMPUTED,
            evaluator_count=len(evaluations),
            overall_agreement=self.compute_overall_agreement(table),
            criteria=table,
        )
