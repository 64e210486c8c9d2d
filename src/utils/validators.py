"""Lenient parsing helpers for hand-edited spreadsheet cells."""

import re
from typing import Any

from utils.error_handling import BadRequestError

_LEADING_INT = re.compile(r"^\s*\+?(\d+)")


def ensure_present(value: Any, field: str) -> None:
    """Raise BadRequestError if value is falsy."""
    if value is None or (isinstance(value, str) and not value.strip()) or value == []:
        raise BadRequestError(f"{field} is required")


def parse_count(value: Any) -> int:
    """
    Parse a ticket or scan count the way the sheet's users expect.

    Takes the leading run of digits ("3 tickets" -> 3, "2.5" -> 2). Missing,
    blank, non-numeric and negative values all read as 0; this never raises.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        return max(int(value), 0)
    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    return int(match.group(1))
