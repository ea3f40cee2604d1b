"""Session loader for YAML and JSON session snapshots."""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import MarkedYAMLError

from evalboard.core.exceptions import ParseError, ValidationError
from evalboard.core.logging import get_logger
from evalboard.session.models import Session

logger = get_logger(__name__)

JSON_SUFFIXES = {".json"}


class SessionLoader:
    """Load and validate session snapshots.

    A snapshot is a mapping with ``id``, ``template`` (categories with
    criteria), ``evaluations`` (scores and comments), optional ``users``
    and optional ``videoDuration``. Keys may be camelCase or snake_case.
    """

    def __init__(self) -> None:
        self.yaml = YAML(typ="safe")

    def load_file(self, file_path: str | Path) -> Session:
        """Load a session from a ``.yaml``, ``.yml`` or ``.json`` file.

        Raises:
            ParseError: If the file is missing or cannot be parsed
            ValidationError: If the content is not a valid session
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            content = file_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ParseError(f"Cannot read session file {file_path}: {e}") from e

        if file_path.suffix.lower() in JSON_SUFFIXES:
            data = self._parse_json(content, str(file_path))
        else:
            data = self._parse_yaml(content)

        session = self._build(data, str(file_path))
        logger.debug(
            "session_loaded",
            path=str(file_path),
            session=session.id,
            evaluations=len(session.evaluations),
        )
        return session

    def load_string(self, content: str) -> Session:
        """Load a session from YAML (or JSON) text."""
        return self._build(self._parse_yaml(content), None)

    def load_dict(self, data: dict[str, Any]) -> Session:
        """Validate an already-parsed session mapping."""
        return self._build(data, None)

    def _parse_json(self, content: str, file_path: str) -> Any:
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise ParseError(
                f"JSON parsing error in {file_path} at line {e.lineno}, "
                f"column {e.colno}: {e.msg}"
            ) from e

    def _parse_yaml(self, content: str) -> Any:
        try:
            data = self.yaml.load(content)
        except MarkedYAMLError as e:
            line = e.problem_mark.line + 1 if e.problem_mark else None
            column = e.problem_mark.column + 1 if e.problem_mark else None
            raise ParseError(
                f"YAML parsing error at line {line}, column {column}: {e.problem}"
            ) from e

        if data is None:
            raise ParseError("Empty session content")
        return data

    def _build(self, data: Any, file_path: str | None) -> Session:
        if not isinstance(data, dict):
            raise ValidationError(
                "Session content must be a mapping", file_path=file_path
            )

        self._validate_semantics(data, file_path)

        try:
            return Session.model_validate(data)
        except PydanticValidationError as e:
            errors = []
            for error in e.errors():
                loc = ".".join(str(x) for x in error["loc"])
                errors.append(f"{loc}: {error['msg']}")

            error_msg = "Model validation failed:\n  " + "\n  ".join(errors)
            raise ValidationError(error_msg, file_path=file_path) from e

    def _validate_semantics(self, data: dict[str, Any], file_path: str | None) -> None:
        """Reject duplicate criterion and evaluation ids.

        Lookups are keyed on ids, so a duplicate would silently shadow an
        entity.
        """
        errors: list[str] = []

        template = data.get("template")
        seen_criteria: set[str] = set()
        if isinstance(template, dict) and isinstance(template.get("categories"), list):
            for i, category in enumerate(template["categories"]):
                if not isinstance(category, dict):
                    continue
                for j, criterion in enumerate(category.get("criteria") or []):
                    if not isinstance(criterion, dict):
                        continue
                    criterion_id = criterion.get("id")
                    if not isinstance(criterion_id, str):
                        continue
                    if criterion_id in seen_criteria:
                        errors.append(
                            f"Duplicate criterion ID '{criterion_id}' at "
                            f"template.categories[{i}].criteria[{j}]"
                        )
                    seen_criteria.add(criterion_id)

        seen_evaluations: set[str] = set()
        for i, evaluation in enumerate(data.get("evaluations") or []):
            if not isinstance(evaluation, dict):
                continue
            evaluation_id = evaluation.get("id")
            if not isinstance(evaluation_id, str):
                continue
            if evaluation_id in seen_evaluations:
                errors.append(
                    f"Duplicate evaluation ID '{evaluation_id}' at evaluations[{i}]"
                )
            seen_evaluations.add(evaluation_id)

        if errors:
            error_msg = "Semantic validation failed:\n  " + "\n  ".join(errors)
            raise ValidationError(error_msg, file_path=file_path)
