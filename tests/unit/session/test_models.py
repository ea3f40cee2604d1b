"""Unit tests for session models."""

import pytest
from pydantic import ValidationError

from evalboard.session.models import (
    UNKNOWN_EVALUATOR,
    Category,
    Comment,
    Criterion,
    Evaluation,
    EvaluationScore,
    Session,
    Template,
    User,
    UserProfile,
    evaluator_label,
    index_by_id,
)


class TestCriterion:
    """Tests for Criterion model."""

    def test_accepts_camel_case_keys(self) -> None:
        """Test that the wire field names are accepted."""
        criterion = Criterion.model_validate(
            {"id": "c1", "name": "Clarity", "minValue": 1, "maxValue": 5, "weight": 2}
        )
        assert criterion.min_value == 1
        assert criterion.max_value == 5
        assert criterion.weight == 2

    def test_defaults(self) -> None:
        """Test default min value and weight."""
        criterion = Criterion(id="c1", name="Clarity", max_value=10)
        assert criterion.min_value == 0
        assert criterion.weight == 1.0

    @pytest.mark.parametrize("max_value", [0, -1])
    def test_max_must_exceed_min(self, max_value: float) -> None:
        """Test that a malformed range is rejected."""
        with pytest.raises(ValidationError, match="must be greater than minValue"):
            Criterion(id="c1", name="Clarity", min_value=0, max_value=max_value)

    def test_weight_must_be_non_negative(self) -> None:
        """Test that negative weights are rejected."""
        with pytest.raises(ValidationError):
            Criterion(id="c1", name="Clarity", max_value=10, weight=-0.1)

    def test_is_frozen(self) -> None:
        """Test that criteria cannot be mutated."""
        criterion = Criterion(id="c1", name="Clarity", max_value=10)
        with pytest.raises(ValidationError):
            criterion.weight = 3  # type: ignore[misc]


class TestTemplate:
    """Tests for Template and Category models."""

    def test_criteria_flattens_in_order(self, template: Template) -> None:
        """Test that criteria are listed across categories in order."""
        assert [c.id for c in template.criteria] == ["clarity", "pacing", "audio"]

    def test_category_criterion_ids(self, template: Template) -> None:
        """Test the category id set."""
        assert template.categories[0].criterion_ids == {"clarity", "pacing"}

    def test_empty_template(self) -> None:
        """Test a template without categories."""
        assert Template(id="t").criteria == []
        assert Category(id="c", name="Empty").criterion_ids == frozenset()


class TestEvaluation:
    """Tests for Evaluation model."""

    def test_score_for(self) -> None:
        """Test looking up a criterion's score."""
        evaluation = Evaluation(
            id="e1",
            user_id="u1",
            scores=(
                EvaluationScore(criterion_id="a", score=3),
                EvaluationScore(criterion_id="b", score=4),
            ),
        )
        assert evaluation.score_for("b") == 4
        assert evaluation.score_for("missing") is None

    def test_out_of_range_scores_are_accepted(self) -> None:
        """Test that the model does not enforce criterion ranges."""
        score = EvaluationScore.model_validate({"criterionId": "a", "score": 250})
        assert score.score == 250

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_score_rejected(self, value: float) -> None:
        """Test that NaN and infinite scores fail validation."""
        with pytest.raises(ValidationError):
            EvaluationScore(criterion_id="a", score=value)

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_timestamp_rejected(self, value: float) -> None:
        with pytest.raises(ValidationError):
            Comment(id="c", user_id="u", timestamp=value)

    def test_non_finite_criterion_bounds_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Criterion(id="c1", name="Clarity", max_value=float("inf"))

    def test_comment_timestamp_non_negative(self) -> None:
        """Test that negative timestamps are rejected."""
        with pytest.raises(ValidationError):
            Comment(id="c", user_id="u", timestamp=-1)


class TestUser:
    """Tests for User labels."""

    def test_display_name_preferred(self) -> None:
        user = User(id="u1", username="alice", profile=UserProfile(display_name="Al"))
        assert user.label == "Al"

    def test_username_fallback(self) -> None:
        assert User(id="u1", username="alice").label == "alice"
        assert (
            User(id="u1", username="alice", profile=UserProfile()).label == "alice"
        )

    def test_unknown_fallback(self) -> None:
        assert User(id="u1").label == UNKNOWN_EVALUATOR

    def test_evaluator_label(self, users: list[User]) -> None:
        users_map = index_by_id(users)
        assert evaluator_label("u1", users_map) == "Alice A."
        assert evaluator_label("nobody", users_map) == UNKNOWN_EVALUATOR
        assert evaluator_label("u1", None) == UNKNOWN_EVALUATOR


class TestSession:
    """Tests for Session snapshot helpers."""

    def test_all_scores_and_comments(self, session: Session) -> None:
        """Test flattening scores and comments across evaluations."""
        assert len(session.all_scores) == 8
        assert [c.timestamp for c in session.all_comments] == [5, 12, 65, 14, 18, 70]

    def test_index_by_id_last_wins(self) -> None:
        """Test that duplicate ids resolve to the last entity."""
        first = Criterion(id="c", name="First", max_value=5)
        second = Criterion(id="c", name="Second", max_value=5)
        assert index_by_id([first, second])["c"].name == "Second"
