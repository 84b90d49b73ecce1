"""Sanitization utilities for spreadsheet-bound output."""

from typing import Optional

# Leading characters that make spreadsheet applications evaluate a cell
# as a formula. | is included for DDE payloads.
_FORMULA_CHARS = ("=", "+", "-", "@", "\t", "\r", "\n", "|")


def sanitize_for_csv(value: Optional[str]) -> Optional[str]:
    """Prefix formula-triggering text with a single quote.

    Training names and adjustment descriptions are free text typed by the
    user, so they are passed through here before landing in CSV or Excel
    cells. Numbers are written as numbers and never need this.

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
