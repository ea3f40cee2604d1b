"""Data models for evaluation sessions.

These are the plain input shapes every analytics component consumes.
Models are frozen: components never mutate a submitted evaluation.
"""

from collections.abc import Iterable
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

UNKNOWN_EVALUATOR = "Unknown"


class _Frozen(BaseModel):
    model_config = ConfigDict(
        frozen=True, populate_by_name=True, allow_inf_nan=False
    )


class Criterion(_Frozen):
    """A single scorable evaluation dimension."""

    id: str = Field(..., description="Criterion identifier", min_length=1)
    name: str = Field(..., description="Display name")
    min_value: float = Field(0.0, alias="minValue", description="Lowest score")
    max_value: float = Field(..., alias="maxValue", description="Highest score")
    weight: float = Field(1.0, ge=0.0, description="Relative weight")

    @model_validator(mode="after")
    def validate_range(self) -> "Criterion":
        """Ensure max_value > min_value."""
        if self.max_value <= self.min_value:
            raise ValueError(
                f"Criterion '{self.id}': maxValue ({self.max_value}) must be "
                f"greater than minValue ({self.min_value})"
            )
        return self


class Category(_Frozen):
    """A named grouping of criteria.

    ``weight`` is for display only and is not required to sum to 1.
    """

    id: str = Field(..., description="Category identifier", min_length=1)
    name: str = Field(..., description="Display name")
    weight: float = Field(1.0, ge=0.0, description="Display weight")
    criteria: tuple[Criterion, ...] = Field(default=())

    @property
    def criterion_ids(self) -> frozenset[str]:
        return frozenset(c.id for c in self.criteria)


class Template(_Frozen):
    """Full evaluation rubric for a session."""

    id: str = Field(..., description="Template identifier")
    name: str = Field("", description="Display name")
    categories: tuple[Category, ...] = Field(default=())

    @property
    def criteria(self) -> list[Criterion]:
        """All criteria across categories, in template order."""
        return [c for category in self.categories for c in category.criteria]


class EvaluationScore(_Frozen):
    """One evaluator's score for one criterion.

    Scores outside the criterion range are accepted as-is.
    """

    criterion_id: str = Field(..., alias="criterionId")
    score: float


class Comment(_Frozen):
    """A timestamped comment; timestamp is seconds into the video."""

    id: str
    user_id: str = Field(..., alias="userId")
    timestamp: float = Field(..., ge=0.0)
    text: str = ""


class Evaluation(_Frozen):
    """One evaluator's submission for a session."""

    id: str
    user_id: str = Field(..., alias="userId")
    scores: tuple[EvaluationScore, ...] = Field(default=())
    comments: tuple[Comment, ...] = Field(default=())
    is_complete: bool = Field(False, alias="isComplete")

    def score_for(self, criterion_id: str) -> float | None:
        """Return the first score given to ``criterion_id``, if any."""
        for entry in self.scores:
            if entry.criterion_id == criterion_id:
                return entry.score
        return None


class UserProfile(_Frozen):
    display_name: str | None = Field(None, alias="displayName")


class User(_Frozen):
    """Evaluator identity; used only to label output."""

    id: str
    username: str | None = None
    profile: UserProfile | None = None

    @property
    def label(self) -> str:
        if self.profile and self.profile.display_name:
            return self.profile.display_name
        return self.username or UNKNOWN_EVALUATOR


class Session(_Frozen):
    """Snapshot of everything the analytics layer needs for one session."""

    id: str
    name: str = ""
    video_duration: float | None = Field(None, alias="videoDuration", ge=0.0)
    template: Template
    evaluations: tuple[Evaluation, ...] = Field(default=())
    users: tuple[User, ...] = Field(default=())

    @property
    def all_scores(self) -> list[EvaluationScore]:
        return [s for evaluation in self.evaluations for s in evaluation.scores]

    @property
    def all_comments(self) -> list[Comment]:
        return [c for evaluation in self.evaluations for c in evaluation.comments]


_T = TypeVar("_T", Criterion, Category, User, Evaluation)


def index_by_id(items: Iterable[_T]) -> dict[str, _T]:
    """Build an id -> entity mapping; later duplicates win."""
    return {item.id: item for item in items}


def evaluator_label(user_id: str, users: dict[str, User] | None) -> str:
    """Resolve a display label for ``user_id``."""
    user = users.get(user_id) if users else None
    return user.label if user else UNKNOWN_EVALUATOR
