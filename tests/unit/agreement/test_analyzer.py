"""Unit tests for AgreementAnalyzer."""

import math

import pytest

from evalboard.agreement.analyzer import AgreementAnalyzer
from evalboard.agreement.models import (
    AgreementLevel,
    AgreementStats,
    AgreementStatus,
)
from evalboard.core.exceptions import InvalidArgumentError
from evalboard.session.models import Criterion, Evaluation
from tests.factories import make_evaluation


def _stats(agreement: float) -> AgreementStats:
    return AgreementStats(mean=1.0, variance=0.0, stddev=0.0, agreement=agreement)


class TestCriterionAgreement:
    """Tests for single-criterion agreement."""

    def test_three_evaluators(self) -> None:
        """Test scores 6, 8, 10 on a 10-point criterion."""
        stats = AgreementAnalyzer.compute_criterion_agreement([6, 8, 10])
        assert stats.mean == pytest.approx(8.0)
        assert stats.variance == pytest.approx(8 / 3)
        assert stats.stddev == pytest.approx(1.633, abs=1e-3)
        assert stats.coefficient_of_variation == pytest.approx(0.204, abs=1e-3)
        assert stats.agreement == pytest.approx(0.796, abs=1e-3)

    @pytest.mark.parametrize("scores", [[7, 7], [3, 3, 3, 3], [0, 0]])
    def test_identical_scores_agree_perfectly(self, scores: list[float]) -> None:
        """Test that identical scores give agreement 1 and variance 0."""
        stats = AgreementAnalyzer.compute_criterion_agreement(scores)
        assert stats.agreement == 1.0
        assert stats.variance == 0.0

    def test_single_score(self) -> None:
        """Test the single-score convention."""
        stats = AgreementAnalyzer.compute_criterion_agreement([4])
        assert stats.mean == 4
        assert stats.stddev == 0.0
        assert stats.agreement == 1.0

    def test_empty_scores(self) -> None:
        """Test the empty-sample convention."""
        stats = AgreementAnalyzer.compute_criterion_agreement([])
        assert stats.mean == 0.0
        assert stats.variance == 0.0
        assert stats.agreement == 1.0

    def test_population_variance(self) -> None:
        """Test that variance divides by n."""
        stats = AgreementAnalyzer.compute_criterion_agreement([8, 7, 9, 8])
        assert stats.variance == pytest.approx(0.5)
        assert stats.stddev == pytest.approx(math.sqrt(0.5))

    def test_zero_mean_has_no_dispersion_penalty(self) -> None:
        """Test that a non-positive mean yields a CV of 0."""
        stats = AgreementAnalyzer.compute_criterion_agreement([-2, 2])
        assert stats.coefficient_of_variation == 0.0
        assert stats.agreement == 1.0

    def test_agreement_floors_at_zero(self) -> None:
        """Test that very high dispersion is clamped to 0."""
        stats = AgreementAnalyzer.compute_criterion_agreement([0, 0, 0, 10])
        assert stats.coefficient_of_variation > 1
        assert stats.agreement == 0.0


class TestOverallAgreement:
    """Tests for overall agreement."""

    def test_unweighted_mean(self) -> None:
        """Test the plain mean over criteria."""
        overall = AgreementAnalyzer.compute_overall_agreement(
            [_stats(1.0), _stats(0.5), _stats(0.0)]
        )
        assert overall == pytest.approx(0.5)

    def test_empty(self) -> None:
        """Test that no criteria counts as full agreement."""
        assert AgreementAnalyzer.compute_overall_agreement([]) == 1.0


class TestAgreementTable:
    """Tests for the per-criterion agreement table."""

    def test_sorted_lowest_first(
        self, evaluations: list[Evaluation], criteria: list[Criterion]
    ) -> None:
        """Test ordering and per-criterion records."""
        table = AgreementAnalyzer().compute_agreement_table(evaluations, criteria)
        assert [r.criterion_id for r in table] == ["clarity", "audio", "pacing"]

        clarity, audio, pacing = table
        assert clarity.scores == [8, 6, 10]
        assert clarity.level == AgreementLevel.MODERATE
        assert audio.scores == [4, 5]
        assert audio.agreement == pytest.approx(1 - 0.5 / 4.5)
        assert audio.level == AgreementLevel.HIGH
        assert pacing.agreement == 1.0

    def test_ties_keep_criteria_order(self, criteria: list[Criterion]) -> None:
        """Test stable ordering for equal agreement."""
        evaluations = [
            make_evaluation("e1", "u1", {"clarity": 5, "pacing": 5, "audio": 5}),
            make_evaluation("e2", "u2", {"clarity": 5, "pacing": 5, "audio": 5}),
        ]
        table = AgreementAnalyzer().compute_agreement_table(evaluations, criteria)
        assert [r.criterion_id for r in table] == ["clarity", "pacing", "audio"]

    def test_criterion_without_scores(self, criteria: list[Criterion]) -> None:
        """Test that unscored criteria report the degenerate values."""
        evaluations = [
            make_evaluation("e1", "u1", {"clarity": 2}),
            make_evaluation("e2", "u2", {"clarity": 8}),
        ]
        table = AgreementAnalyzer().compute_agreement_table(evaluations, criteria)
        by_id = {r.criterion_id: r for r in table}
        assert by_id["audio"].scores == []
        assert by_id["audio"].agreement == 1.0
        assert table[0].criterion_id == "clarity"


class TestAnalyze:
    """Tests for the full agreement report."""

    def test_report(
        self, evaluations: list[Evaluation], criteria: list[Criterion]
    ) -> None:
        """Test the computed report and counts."""
        report = AgreementAnalyzer().analyze(evaluations, criteria)
        assert report.status == AgreementStatus.COMPUTED
        assert report.is_sufficient
        assert report.evaluator_count == 3
        expected = (
            (1 - math.sqrt(8 / 3) / 8) + (1 - 0.5 / 4.5) + 1.0
        ) / 3
        assert report.overall_agreement == pytest.approx(expected)
        assert report.high_agreement_count == 2
        assert report.low_agreement_count == 0

    @pytest.mark.parametrize("count", [0, 1])
    def test_insufficient_data(self, criteria: list[Criterion], count: int) -> None:
        """Test that fewer than two evaluations is signalled explicitly."""
        evaluations = [make_evaluation("e1", "u1", {"clarity": 3})][:count]
        report = AgreementAnalyzer().analyze(evaluations, criteria)
        assert report.status == AgreementStatus.INSUFFICIENT_DATA
        assert not report.is_sufficient
        assert report.overall_agreement is None
        assert report.criteria == []
        assert report.to_dict() == {
            "status": "insufficient_data",
            "evaluator_count": count,
        }

    def test_idempotent(
        self, evaluations: list[Evaluation], criteria: list[Criterion]
    ) -> None:
        """Test that repeated calls give identical output."""
        analyzer = AgreementAnalyzer()
        first = analyzer.analyze(evaluations, criteria)
        second = analyzer.analyze(evaluations, criteria)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_to_dict(
        self, evaluations: list[Evaluation], criteria: list[Criterion]
    ) -> None:
        """Test serialization of a computed report."""
        data = AgreementAnalyzer().analyze(evaluations, criteria).to_dict()
        assert data["status"] == "computed"
        assert data["criteria"][0]["criterion_id"] == "clarity"
        assert data["criteria"][0]["agreement"] == 0.7959
        assert data["criteria"][0]["n_scores"] == 3


class TestClassification:
    """Tests for agreement bands."""

    @pytest.mark.parametrize(
        ("value", "level"),
        [
            (1.0, AgreementLevel.HIGH),
            (0.8, AgreementLevel.HIGH),
            (0.79, AgreementLevel.MODERATE),
            (0.6, AgreementLevel.MODERATE),
            (0.59, AgreementLevel.LOW),
            (0.0, AgreementLevel.LOW),
        ],
    )
    def test_default_thresholds(self, value: float, level: AgreementLevel) -> None:
        assert AgreementAnalyzer().classify(value) == level

    def test_custom_thresholds(self) -> None:
        analyzer = AgreementAnalyzer(high_threshold=0.9, moderate_threshold=0.5)
        assert analyzer.classify(0.85) == AgreementLevel.MODERATE

    def test_invalid_thresholds(self) -> None:
        with pytest.raises(InvalidArgumentError):
            AgreementAnalyzer(high_threshold=0.5, moderate_threshold=0.7)
        with pytest.raises(InvalidArgumentError):
            AgreementAnalyzer(high_threshold=1.5)
