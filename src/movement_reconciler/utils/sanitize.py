"""Sanitization utilities for safe spreadsheet output."""

from typing import Optional

# Characters that trigger formula execution in spreadsheet applications
# when they appear at the start of a cell value; | covers DDE payloads
_FORMULA_CHARS = ("=", "+", "-", "@", "\t", "\r", "\n", "|")


def sanitize_for_csv(value: Optional[str]) -> Optional[str]:
    """Sanitize a string value for CSV output opened in a spreadsheet.

    Movement labels come straight from bank feeds, so a label such as
    "=HYPERLINK(...)" is prefixed with a single quote to keep it inert.

    Args:
        value: String value to sanitize, or None.

    Returns:
        Sanitized string, or None if input was None.
    """
    if value is None:
        return None

    if not value:
        return value

    if value.startswith(_FORMULA_CHARS):
        return "'" + value

    return value
