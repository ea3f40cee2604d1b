"""Evalboard exceptions."""


class EvalboardError(Exception):
    """Base exception for all Evalboard errors."""


class InvalidArgumentError(EvalboardError, ValueError):
    """A domain argument is outside its valid range.

    Raised for programming or configuration mistakes such as a negative
    video duration or a non-positive cluster width. Sparse data never
    raises this.
    """


class LoaderError(EvalboardError):
    """Base exception for session loader errors."""


class ValidationError(LoaderError):
    """Validation error with line number information."""

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        file_path: str | None = None,
    ):
        self.message = message
        self.line = line
        self.column = column
        self.file_path = file_path

        location_parts = []
        if file_path:
            location_parts.append(f"File: {file_path}")
        if line is not None:
            location_parts.append(f"Line: {line}")
        if column is not None:
            location_parts.append(f"Column: {column}")

        if location_parts:
            full_message = f"{', '.join(location_parts)}: {message}"
        else:
            full_message = message

        super().__init__(full_message)


class ParseError(LoaderError):
    """Session file parsing error."""
