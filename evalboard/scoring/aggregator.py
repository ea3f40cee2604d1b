"""Score aggregation for evaluation sessions."""

from collections.abc import Iterable, Sequence

from evalboard.core.logging import get_logger
from evalboard.session.models import (
    Category,
    Criterion,
    Evaluation,
    EvaluationScore,
    User,
    evaluator_label,
    index_by_id,
)

from .models import (
    CategoryAverage,
    CategoryProfileEntry,
    CriterionAverage,
    EvaluatorScore,
    SessionOverview,
)

logger = get_logger(__name__)

# maxValue shown for scores whose criterion is not in the template
DEFAULT_MAX_VALUE = 10.0
UNKNOWN_CRITERION = "Unknown"


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


class ScoreAggregator:
    """
    Aggregates raw criterion scores into evaluator totals and averages.

    The weighted total for an evaluator is calculated as:
        Total = Σ(score_i / max_i × weight_i) / Σ(weight_i) × 100

    over the scores whose criterion is known. Scores referencing a
    criterion that is not supplied are skipped. Every method returns a
    defined value for empty input and never divides by zero.
    """

    def compute_evaluator_total(
        self,
        evaluation: Evaluation,
        criteria: Iterable[Criterion] | dict[str, Criterion],
    ) -> float:
        """
        Calculate the weighted total (0-100) for one evaluation.

        Args:
            evaluation: The evaluator's submission.
            criteria: Known criteria, as a sequence or an id -> criterion map.

        Returns:
            Weighted total, or 0.0 when no known criterion carries weight.
        """
        criteria_map = criteria if isinstance(criteria, dict) else index_by_id(criteria)

        weighted_sum = 0.0
        max_possible = 0.0
        for entry in evaluation.scores:
            criterion = criteria_map.get(entry.criterion_id)
            if criterion is None:
                logger.debug(
                    "unknown_criterion_skipped",
                    evaluation_id=evaluation.id,
                    criterion_id=entry.criterion_id,
                )
                continue
            ratio = entry.score / criterion.max_value if criterion.max_value else 0.0
            weighted_sum += ratio * criterion.weight * 100
            max_possible += criterion.weight * 100

        return (weighted_sum / max_possible) * 100 if max_possible > 0 else 0.0

    def compute_category_average(
        self,
        category: Category,
        scores: Iterable[EvaluationScore],
    ) -> CategoryAverage:
        """
        Calculate the mean raw score of a category.

        Args:
            category: Category whose criteria select the scores.
            scores: Raw scores from any number of evaluations.

        Returns:
            CategoryAverage; average is 0 when no score belongs to the
            category and max_score is 0 when the category has no criteria.
        """
        ids = category.criterion_ids
        values = [s.score for s in scores if s.criterion_id in ids]
        max_score = max((c.max_value for c in category.criteria), default=0.0)

        return CategoryAverage(
            category_id=category.id,
            name=category.name,
            weight=category.weight,
            average=_mean(values),
            max_score=max_score,
            count=len(values),
        )

    def compute_evaluator_ranking(
        self,
        evaluations: Iterable[Evaluation],
        criteria: Iterable[Criterion],
        users: Iterable[User] | None = None,
    ) -> list[EvaluatorScore]:
        """
        Rank evaluators by weighted total, highest first.

        Ties keep input order. ``users`` only affects the labels.
        """
        criteria_map = index_by_id(criteria)
        users_map = index_by_id(users) if users is not None else None

        totals = [
            EvaluatorScore(
                evaluation_id=evaluation.id,
                evaluator_id=evaluation.user_id,
                evaluator_name=evaluator_label(evaluation.user_id, users_map),
                score=self.compute_evaluator_total(evaluation, criteria_map),
            )
            for evaluation in evaluations
        ]
        # sorted() is stable, including with reverse=True
        return sorted(totals, key=lambda item: item.score, reverse=True)

    def compute_criterion_averages(
        self,
        scores: Iterable[EvaluationScore],
        criteria: Iterable[Criterion],
    ) -> list[CriterionAverage]:
        """
        Average raw scores per criterion id, in first-seen order.

        Criterion ids absent from ``criteria`` are still reported, labelled
        "Unknown" with a max value of 10.
        """
        criteria_map = index_by_id(criteria)
        grouped: dict[str, list[float]] = {}
        for entry in scores:
            grouped.setdefault(entry.criterion_id, []).append(entry.score)

        result = []
        for criterion_id, values in grouped.items():
            criterion = criteria_map.get(criterion_id)
            result.append(
                CriterionAverage(
                    criterion_id=criterion_id,
                    name=criterion.name if criterion else UNKNOWN_CRITERION,
                    average=_mean(values),
                    max_value=criterion.max_value if criterion else DEFAULT_MAX_VALUE,
                    count=len(values),
                )
            )
        return result

    def compute_category_profile(
        self,
        categories: Iterable[Category],
        scores: Iterable[EvaluationScore],
    ) -> list[CategoryProfileEntry]:
        """
        Normalize category averages to percentages.

        Only categories that received at least one score are returned, in
        the order their first score was seen. max_score is the largest
        maxValue among the criteria that were actually scored.
        """
        owner: dict[str, tuple[Category, Criterion]] = {}
        for category in categories:
            for criterion in category.criteria:
                owner[criterion.id] = (category, criterion)

        grouped: dict[str, tuple[Category, list[float], list[float]]] = {}
        for entry in scores:
            match = owner.get(entry.criterion_id)
            if match is None:
                continue
            category, criterion = match
            _, values, maxima = grouped.setdefault(category.id, (category, [], []))
            values.append(entry.score)
            maxima.append(criterion.max_value)

        profile = []
        for category, values, maxima in grouped.values():
            average = _mean(values)
            max_score = max(0.0, *maxima)
            profile.append(
                CategoryProfileEntry(
                    category_id=category.id,
                    name=category.name,
                    average=average,
                    max_score=max_score,
                    normalized=average / max_score * 100 if max_score else 0.0,
                )
            )
        return profile

    def compute_session_overview(
        self, evaluations: Sequence[Evaluation]
    ) -> SessionOverview:
        """Count evaluations and average every raw score in the session."""
        all_scores = [s.score for e in evaluations for s in e.scores]
        return SessionOverview(
            total_evaluations=len(evaluations),
            completed_evaluations=sum(1 for e in evaluations if e.is_complete),
            average_score=_mean(all_scores),
        )
