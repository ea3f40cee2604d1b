"""Shared pytest fixtures for Evalboard tests."""

from pathlib import Path
from typing import Any

import pytest

from evalboard.core.logging import reset_logging
from evalboard.session.models import (
    Category,
    Criterion,
    Evaluation,
    Session,
    Template,
    User,
    UserProfile,
)
from tests.factories import make_evaluation


@pytest.fixture(autouse=True)
def _reset_logging() -> Any:
    """Keep structlog and root logger state isolated between tests."""
    yield
    reset_logging()


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def criteria() -> list[Criterion]:
    """Three weighted criteria."""
    return [
        Criterion(id="clarity", name="Clarity", max_value=10, weight=0.5),
        Criterion(id="pacing", name="Pacing", max_value=10, weight=0.3),
        Criterion(id="audio", name="Audio", max_value=5, weight=0.2),
    ]


@pytest.fixture
def template(criteria: list[Criterion]) -> Template:
    """Template with a content and a production category."""
    clarity, pacing, audio = criteria
    return Template(
        id="tpl-1",
        name="Lecture review",
        categories=(
            Category(
                id="content", name="Content", weight=0.7, criteria=(clarity, pacing)
            ),
            Category(id="production", name="Production", weight=0.3, criteria=(audio,)),
        ),
    )


@pytest.fixture
def users() -> list[User]:
    """Evaluators with and without display names."""
    return [
        User(id="u1", username="alice", profile=UserProfile(display_name="Alice A.")),
        User(id="u2", username="bob"),
        User(id="u3"),
    ]


@pytest.fixture
def evaluations() -> list[Evaluation]:
    """Three evaluations, one of them incomplete."""
    return [
        make_evaluation(
            "e1", "u1", {"clarity": 8, "pacing": 6, "audio": 4}, [5, 12, 65]
        ),
        make_evaluation(
            "e2", "u2", {"clarity": 6, "pacing": 6, "audio": 5}, [14, 18]
        ),
        make_evaluation(
            "e3",
            "u3",
            {"clarity": 10, "pacing": 6},
            [70],
            is_complete=False,
        ),
    ]


@pytest.fixture
def session(
    template: Template, evaluations: list[Evaluation], users: list[User]
) -> Session:
    """A complete session snapshot."""
    return Session(
        id="s-1",
        name="Week 1",
        video_duration=120,
        template=template,
        evaluations=tuple(evaluations),
        users=tuple(users),
    )
