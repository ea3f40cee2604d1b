"""Session input models shared by all analytics components."""

from .models import (
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

__all__ = [
    "UNKNOWN_EVALUATOR",
    "Category",
    "Comment",
    "Criterion",
    "Evaluation",
    "EvaluationScore",
    "Session",
    "Template",
    "User",
    "UserProfile",
    "evaluator_label",
    "index_by_id",
]
