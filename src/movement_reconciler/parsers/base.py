"""Parser exceptions."""

from pathlib import Path
from typing import Optional


class ParseError(Exception):
    """Exception raised when parsing fails."""

    def __init__(self, message: str, file_path: Optional[Path] = None):
        """Initialize ParseError.

        Args:
            message: Error message.
            file_path: Optional path to the file that failed to parse.
        """
        self.file_path = file_path
        super().__init__(message)


class RequestValidationError(ParseError):
    """Raised when a request document violates the input schema.

    Every violation found is kept in ``errors`` so the caller can report
    them all at once.
    """

    def __init__(self, errors: list[str], file_path: Optional[Path] = None):
        """Initialize RequestValidationError.

        Args:
            errors: One message per schema violation.
            file_path: Optional path to the request file.
        """
        self.errors = list(errors)
        summary = f"Invalid request: {len(self.errors)} error(s)"
        if self.errors:
            summary += f"; first: {self.errors[0]}"
        super().__init__(summary, file_path)
