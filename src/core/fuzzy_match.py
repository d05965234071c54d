"""Generic fuzzy matching utility for phrase-based inventory searches."""

from collections.abc import Sequence
from typing import TypeVar

from src.domain.pantry import PantryItem


T = TypeVar("T", bound=PantryItem)


def _get_text(item: PantryItem, key: str) -> str | None:
    """Safely get a non-empty string field value from an item."""
    value = getattr(item, key, None)
    return value if isinstance(value, str) and value else None


def overlaps(text: str, phrase: str) -> bool:
    """Return True if either string contains the other, ignoring case."""
    text_lower = text.lower()
    phrase_lower = phrase.lower()
    return text_lower in phrase_lower or phrase_lower in text_lower


def containment_match_all(
    items: Sequence[T],
    phrase: str,
    *,
    keys: tuple[str, ...] = ("name", "location"),
) -> list[T]:
    """Find all items whose fields overlap a free-text phrase.

    An item matches when, for any of the given keys, the field value contains
    the phrase or the phrase contains the field value (case-insensitive).
    Empty fields never match.

    Args:
        items: Ordered snapshot of items to search
        phrase: User's search phrase
        keys: Item attributes to compare against

    Returns:
        Matching items in snapshot order (may be empty)
    """
    if not phrase.strip():
        return []

    return [
        item for item in items if any((v := _get_text(item, key)) and overlaps(v, phrase) for key in keys)
    ]


def soonest_expiring(items: Sequence[T]) -> T | None:
    """Pick the item with the earliest expiration date.

    Ties keep the first item in the given order.
    """
    return min(items, key=lambda item: item.expiration_date, default=None)
