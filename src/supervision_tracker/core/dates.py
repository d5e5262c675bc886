# src/supervision_tracker/core/dates.py

"""
Calendar helpers shared by the lifecycle and report engines.

Stored records keep dates as ISO strings (YYYY-MM-DD) and months as YYYY-MM.
Comparisons are always done on parsed `date` objects, never on raw strings.
"""

from __future__ import annotations

import re
from datetime import date, datetime

from .errors import InvalidDateError

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def parse_date(value: object) -> date:
    """Parse a strict YYYY-MM-DD string into a date."""
    if not isinstance(value, str) or not _DATE_RE.match(value.strip()):
        raise InvalidDateError(value)
    try:
        return date.fromisoformat(value.strip())
    except ValueError as e:
        raise InvalidDateError(value) from e


def to_date(value: date | str) -> date:
    """Accept a date/datetime or an ISO string ("today" arguments)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_date(value)


def parse_month(value: object) -> str:
    """Validate a YYYY-MM month string and return it normalized."""
    if not isinstance(value, str) or not _MONTH_RE.match(value.strip()):
        raise InvalidDateError(value, expected="YYYY-MM")
    return value.strip()


def current_month(today: date | str) -> str:
    return to_date(today).strftime("%Y-%m")


def day_of_month(today: date | str) -> int:
    return to_date(today).day


def now_iso() -> str:
    # Local wall-clock timestamp for createdAt fields.
    return datetime.now().astimezone().isoformat(timespec="seconds")
