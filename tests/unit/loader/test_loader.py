"""Unit tests for SessionLoader."""

import json
from pathlib import Path

import pytest

from evalboard.core.exceptions import ParseError, ValidationError
from evalboard.loader import SessionLoader

MINIMAL = """
id: s-min
template:
  id: t
  categories:
    - id: c
      name: C
      criteria:
        - {id: a, name: A, maxValue: 10}
"""


class TestLoadFile:
    """Tests for loading session files."""

    def test_load_yaml_fixture(self, fixtures_dir: Path) -> None:
        """Test loading the sample YAML session."""
        session = SessionLoader().load_file(fixtures_dir / "sample_session.yaml")
        assert session.id == "s-1"
        assert session.video_duration == 120
        assert [c.id for c in session.template.criteria] == [
            "clarity",
            "pacing",
            "audio",
        ]
        assert len(session.evaluations) == 3
        assert session.evaluations[2].is_complete is False
        assert session.users[0].label == "Alice A."
        assert session.evaluations[0].comments[0].text == "Good intro"

    def test_load_json(self, tmp_path: Path) -> None:
        """Test loading a JSON snapshot with camelCase keys."""
        path = tmp_path / "session.json"
        path.write_text(
            json.dumps(
                {
                    "id": "s-json",
                    "videoDuration": 90,
                    "template": {"id": "t", "categories": []},
                    "evaluations": [
                        {
                            "id": "e1",
                            "userId": "u1",
                            "scores": [{"criterionId": "a", "score": 3}],
                        }
                    ],
                }
            )
        )
        session = SessionLoader().load_file(path)
        assert session.id == "s-json"
        assert session.evaluations[0].scores[0].criterion_id == "a"

    def test_json_nan_score(self, tmp_path: Path) -> None:
        """Test that a NaN literal in JSON fails validation with the path."""
        path = tmp_path / "nan.json"
        path.write_text(
            '{"id": "s", "template": {"id": "t"}, "evaluations": '
            '[{"id": "e1", "userId": "u1", '
            '"scores": [{"criterionId": "a", "score": NaN}]}]}'
        )
        with pytest.raises(ValidationError) as exc_info:
            SessionLoader().load_file(path)
        assert exc_info.value.file_path == str(path)
        assert "evaluations.0.scores.0.score" in str(exc_info.value)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ParseError, match="File not found"):
            SessionLoader().load_file(tmp_path / "nope.yaml")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ParseError, match="JSON parsing error"):
            SessionLoader().load_file(path)

    def test_validation_error_carries_path(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("id: s\n")
        with pytest.raises(ValidationError) as exc_info:
            SessionLoader().load_file(path)
        assert exc_info.value.file_path == str(path)
        assert "template" in str(exc_info.value)


class TestLoadString:
    """Tests for loading from text and mappings."""

    def test_minimal(self) -> None:
        session = SessionLoader().load_string(MINIMAL)
        assert session.id == "s-min"
        assert session.video_duration is None
        assert session.evaluations == ()

    def test_yaml_syntax_error(self) -> None:
        with pytest.raises(ParseError, match="YAML parsing error"):
            SessionLoader().load_string("id: [unclosed\n")

    def test_empty_content(self) -> None:
        with pytest.raises(ParseError, match="Empty"):
            SessionLoader().load_string("")

    def test_non_mapping(self) -> None:
        with pytest.raises(ValidationError, match="must be a mapping"):
            SessionLoader().load_string("- just\n- a list\n")

    def test_malformed_criterion_range(self) -> None:
        """Test that maxValue <= minValue is reported."""
        content = MINIMAL.replace("maxValue: 10", "minValue: 5, maxValue: 5")
        with pytest.raises(ValidationError, match="Model validation failed"):
            SessionLoader().load_string(content)

    @pytest.mark.parametrize("value", [".nan", ".inf", "-.inf"])
    def test_non_finite_score(self, value: str) -> None:
        """Test that YAML NaN and infinity scores are rejected."""
        content = MINIMAL + (
            "evaluations:\n"
            "  - id: e1\n"
            "    userId: u1\n"
            f"    scores: [{{criterionId: a, score: {value}}}]\n"
        )
        with pytest.raises(ValidationError, match="Model validation failed"):
            SessionLoader().load_string(content)

    def test_infinite_comment_timestamp(self) -> None:
        content = MINIMAL + (
            "evaluations:\n"
            "  - id: e1\n"
            "    userId: u1\n"
            "    comments: [{id: c1, userId: u1, timestamp: .inf}]\n"
        )
        with pytest.raises(ValidationError, match="timestamp"):
            SessionLoader().load_string(content)

    def test_load_dict(self) -> None:
        session = SessionLoader().load_dict(
            {"id": "s", "template": {"id": "t"}, "users": [{"id": "u1"}]}
        )
        assert session.users[0].label == "Unknown"


class TestSemanticValidation:
    """Tests for duplicate id detection."""

    def test_duplicate_criterion_ids(self) -> None:
        content = """
id: s
template:
  id: t
  categories:
    - id: c1
      name: One
      criteria:
        - {id: a, name: A, maxValue: 10}
    - id: c2
      name: Two
      criteria:
        - {id: a, name: A again, maxValue: 5}
"""
        with pytest.raises(ValidationError) as exc_info:
            SessionLoader().load_string(content)
        message = str(exc_info.value)
        assert "Semantic validation failed" in message
        assert "Duplicate criterion ID 'a'" in message
        assert "template.categories[1].criteria[0]" in message

    def test_duplicate_evaluation_ids(self) -> None:
        content = MINIMAL + (
            "evaluations:\n"
            "  - {id: e1, userId: u1}\n"
            "  - {id: e1, userId: u2}\n"
        )
        with pytest.raises(ValidationError, match="Duplicate evaluation ID 'e1'"):
            SessionLoader().load_string(content)
