"""Quantity and expiration-date extraction for free-text pantry commands."""

import re
from collections.abc import Callable
from datetime import date, timedelta

from src.core.config import settings


NUMBER_WORDS: dict[str, int] = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
}

QUANTITY_PATTERN = re.compile(r"^(\d+)\s+")
ABSOLUTE_DATE_PATTERN = re.compile(r"(\d{4}-\d{2}-\d{2})")
RELATIVE_DATE_PATTERN = re.compile(
    rf"in\s+(\d+|{'|'.join(NUMBER_WORDS)})\s+(day|days|week|weeks|month|months)\b",
    re.IGNORECASE,
)
# "exp." keeps its dot; the other terms end on a word boundary
_EXPIRY_TERMS = r"(?:(?:expire[sd]?|expiring|use[-\s]?by|best[-\s]?by)\b|exp\b\.?)"
EXPIRY_KEYWORD_PATTERN = re.compile(rf"\b{_EXPIRY_TERMS}", re.IGNORECASE)
CONNECTOR_EXPIRY_PATTERN = re.compile(rf"\b(?:that|which)\s+{_EXPIRY_TERMS}", re.IGNORECASE)
TODAY_TOMORROW_PATTERN = re.compile(r"\b(today|tomorrow)\b", re.IGNORECASE)
TOMORROW_PATTERN = re.compile(r"\btomorrow\b", re.IGNORECASE)
TODAY_PATTERN = re.compile(r"\btoday\b", re.IGNORECASE)


def extract_quantity(text: str) -> int:
    """Return the leading integer count of an utterance, or 1 when there is none.

    "3 avocados" -> 3, "avocados" -> 1. A leading zero count is treated as 1.
    """
    match = QUANTITY_PATTERN.match(text.strip())
    if not match:
        return 1
    return max(int(match.group(1)), 1)


def add_months(start: date, months: int) -> date:
    """Advance a date by whole calendar months, keeping the day of month.

    A day that does not exist in the target month rolls over into the next one,
    so January 31 plus one month is March 3 (or March 2 in a leap year).
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, 1) + timedelta(days=start.day - 1)


def _parse_count(raw: str) -> int:
    raw = raw.lower()
    if raw in NUMBER_WORDS:
        return NUMBER_WORDS[raw]
    return int(raw)


def _absolute_date(text: str, today: date) -> date | None:
    match = ABSOLUTE_DATE_PATTERN.search(text)
    if not match:
        return None
    try:
        return date.fromisoformat(match.group(1))
    except ValueError:
        return None


def _relative_date(text: str, today: date) -> date | None:
    # Only the first relative expression in the text is honored
    match = RELATIVE_DATE_PATTERN.search(text)
    if not match:
        return None

    try:
        count = _parse_count(match.group(1))
        if count <= 0:
            return None

        unit = match.group(2).lower()
        if unit.startswith("day"):
            return today + timedelta(days=count)
        if unit.startswith("week"):
            return today + timedelta(weeks=count)
        return add_months(today, count)
    except (OverflowError, ValueError):
        # Past the last representable calendar date: leave the expiry unresolved
        return None


def _tomorrow(text: str, today: date) -> date | None:
    return today + timedelta(days=1) if TOMORROW_PATTERN.search(text) else None


def _today(text: str, today: date) -> date | None:
    return today if TODAY_PATTERN.search(text) else None


# Tried in order; the first rule that resolves a date wins
DATE_RULES: tuple[Callable[[str, date], date | None], ...] = (
    _absolute_date,
    _relative_date,
    _tomorrow,
    _today,
)


def has_expiry_language(text: str) -> bool:
    """Return True if the utterance talks about expiration at all.

    Matches expires/expire/expired/exp./use-by/best-by in any casing or spacing.
    """
    return EXPIRY_KEYWORD_PATTERN.search(text) is not None


def extract_expiration_date(text: str, *, today: date | None = None) -> date | None:
    """Resolve the expiration date mentioned in an utterance.

    Rules, in priority order:
    - Absolute date: "2026-03-01"
    - Relative expression: "in 3 days", "in two weeks", "in 1 month"
    - "tomorrow", then "today"
    - Default horizon (settings.default_expiry_days) when no expiry wording is present

    Args:
        text: Raw utterance
        today: Reference date (defaults to the local current date)

    Returns:
        The resolved date, or None when the utterance mentions expiration
        but the timing could not be understood.
    """
    today = today or date.today()

    for rule in DATE_RULES:
        resolved = rule(text, today)
        if resolved is not None:
            return resolved

    if has_expiry_language(text):
        return None

    return today + timedelta(days=settings.default_expiry_days)
