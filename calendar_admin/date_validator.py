"""Blocked-date validation shared by the API server and the Telegram bot.

Dates travel as DD-MM-YYYY strings. Validation is pure arithmetic on the
three fields; no calendar library is involved, so the result never depends
on the platform locale or timezone.

February always allows 29 days: leap years are not computed.
"""
import re
from typing import Tuple

from calendar_admin.config import DATE_FORMAT_HINT, MAX_YEAR, MIN_YEAR

DATE_PATTERN = re.compile(r'[0-9]{2}-[0-9]{2}-[0-9]{4}')
UNSAFE_CHARS_PATTERN = re.compile(r'[^0-9-]')

# Index 0 is January
DAYS_IN_MONTH = (31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


class InvalidDateError(ValueError):
    """Raised when a date string is malformed or out of range."""
    pass


def _split(raw: str) -> Tuple[int, int, int]:
    day, month, year = raw.split('-')
    return int(day), int(month), int(year)


def validate_date(raw: str) -> str:
    """
    Validate a DD-MM-YYYY date string.

    Args:
        raw: Date as received from a caller

    Returns:
        The validated date string

    Raises:
        InvalidDateError: If the format or any field range is wrong
    """
    if not isinstance(raw, str) or not DATE_PATTERN.fullmatch(raw):
        raise InvalidDateError(f"Invalid date format (use {DATE_FORMAT_HINT})")

    day, month, year = _split(raw)

    if not 1 <= month <= 12:
        raise InvalidDateError(f"Invalid month: {month:02d}")
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidDateError(f"Year must be between {MIN_YEAR} and {MAX_YEAR}")
    if not 1 <= day <= DAYS_IN_MONTH[month - 1]:
        raise InvalidDateError(f"Invalid day {day:02d} for month {month:02d}")

    return raw


def is_valid_date(raw: str) -> bool:
    """Return True if raw is an acceptable blocked date."""
    try:
        validate_date(raw)
    except InvalidDateError:
        return False
    return True


def sanitize_date(raw: str) -> str:
    """Strip every character outside [0-9-]."""
    return UNSAFE_CHARS_PATTERN.sub('', raw)


def date_sort_key(value: str) -> Tuple[int, int, int]:
    """Chronological sort key (year, month, day) for a validated date."""
    day, month, year = _split(value)
    return year, month, day
