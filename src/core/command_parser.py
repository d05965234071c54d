"""Natural-language command interpreter for pantry inventory.

Turns a free-form sentence into either an AddCommand or the id of an
inventory item to delete. Parsing is pure: no I/O and no state between calls.

Add path:
    "2 yogurts exp 2026-03-01"      -> 2 x "yogurts", expires 2026-03-01
    "milk in the fridge in 3 days"  -> "milk" in "fridge", expires today + 3

Delete path:
    "delete the shaved steak"       -> id of the matching item, soonest expiry first
"""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from src.core import date_parser
from src.core.config import settings
from src.core.fuzzy_match import containment_match_all, soonest_expiring
from src.domain.pantry import (
    AddCommand,
    CommandAction,
    DeleteQuery,
    DeleteTarget,
    PantryItem,
    ParseErrorKind,
    ParseFailure,
)


logger = logging.getLogger(__name__)

COMMAND_KEYWORD_PATTERN = re.compile(r"\b(delete|remove)\b", re.IGNORECASE)
DELETE_FILLER_PATTERN = re.compile(r"^(?:the item|the|this|that|item|my)\s+", re.IGNORECASE)
TRAILING_PUNCTUATION_PATTERN = re.compile(r"[.!?]+$")
LOCATION_PATTERN = re.compile(r"\b(?:in|on|at)\s+(?:the\s+)?([a-z0-9\s\-]+)$", re.IGNORECASE)
WHITESPACE_PATTERN = re.compile(r"\s+")


@dataclass(frozen=True)
class CueMatch:
    """Where a date, timing or quantity cue was found in an utterance."""

    kind: str
    start: int
    end: int


# Priority-ordered; when two cues begin at the same offset the earlier entry wins
CUE_MATCHERS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("absolute_date", date_parser.ABSOLUTE_DATE_PATTERN),
    ("relative_date", date_parser.RELATIVE_DATE_PATTERN),
    ("expiry_connector", date_parser.CONNECTOR_EXPIRY_PATTERN),
    ("expiry_keyword", date_parser.EXPIRY_KEYWORD_PATTERN),
    ("today_tomorrow", date_parser.TODAY_TOMORROW_PATTERN),
    ("quantity", date_parser.QUANTITY_PATTERN),
)

# Scrubbed from the name window, in this order
NAME_SCRUB_PATTERNS: tuple[re.Pattern[str], ...] = (
    date_parser.ABSOLUTE_DATE_PATTERN,
    date_parser.EXPIRY_KEYWORD_PATTERN,
    date_parser.RELATIVE_DATE_PATTERN,
    date_parser.TODAY_TOMORROW_PATTERN,
)


def find_cues(text: str) -> list[CueMatch]:
    """Return the first match of every cue matcher present in the text, in priority order."""
    cues = []
    for kind, pattern in CUE_MATCHERS:
        match = pattern.search(text)
        if match:
            cues.append(CueMatch(kind=kind, start=match.start(), end=match.end()))
    return cues


def cutoff_index(cues: Sequence[CueMatch]) -> int | None:
    """Earliest offset at which any cue begins, or None when there are no cues."""
    earliest = min(cues, key=lambda cue: cue.start, default=None)
    return earliest.start if earliest else None


def normalize_name(text: str) -> str:
    """Derive the item name from an utterance by cutting away cue language.

    A leading quantity is consumed. Everything from the earliest remaining cue
    onwards is dropped; a cue at the very start of the name window does not
    truncate. Leftover date and timing words are scrubbed and whitespace is
    collapsed. May return an empty string.
    """
    text = text.strip()
    cues = find_cues(text)

    quantity = next((cue for cue in cues if cue.kind == "quantity"), None)
    name_start = quantity.end if quantity else 0

    cutoff = cutoff_index([cue for cue in cues if cue.start > name_start])
    name = text[name_start:cutoff]

    for pattern in NAME_SCRUB_PATTERNS:
        name = pattern.sub("", name)

    return WHITESPACE_PATTERN.sub(" ", name).strip()


def extract_location(name: str) -> tuple[str, str | None]:
    """Split a trailing "in/on/at (the) <place>" phrase off an item name.

    "milk in the fridge" -> ("milk", "fridge")

    Returns:
        Tuple of (name without the location phrase, location or None)
    """
    match = LOCATION_PATTERN.search(name)
    if not match:
        return name, None
    return name[: match.start()].strip(), match.group(1).strip()


def classify_command(text: str) -> CommandAction:
    """Route an utterance to the delete branch if it says "delete" or "remove"."""
    if COMMAND_KEYWORD_PATTERN.search(text):
        return CommandAction.DELETE
    return CommandAction.ADD


def parse_add_command(text: str, *, today: date | None = None) -> AddCommand | ParseFailure:
    """Parse an add utterance into an AddCommand.

    Args:
        text: Raw utterance (e.g., "bag of salad expires tomorrow")
        today: Reference date for relative expressions

    Returns:
        AddCommand, or ParseFailure(AMBIGUOUS_EXPIRY) when the utterance talks
        about expiration in a way that could not be understood.
    """
    text = text.strip()

    expiration_date = date_parser.extract_expiration_date(text, today=today)
    if expiration_date is None:
        logger.info("Ambiguous expiry in add command", extra={"utterance": text})
        return ParseFailure(kind=ParseErrorKind.AMBIGUOUS_EXPIRY, detail=text)

    name, location = extract_location(normalize_name(text))

    return AddCommand(
        name=name or settings.default_item_name,
        quantity=date_parser.extract_quantity(text),
        expiration_date=expiration_date,
        location=location,
    )


def extract_delete_query(text: str) -> DeleteQuery | None:
    """Extract the phrase a delete utterance refers to.

    "Delete the shaved steak!" -> DeleteQuery(phrase="shaved steak")

    Returns:
        DeleteQuery, or None when the text has no delete/remove keyword
    """
    match = COMMAND_KEYWORD_PATTERN.search(text)
    if not match:
        return None

    phrase = text[match.end() :].strip()
    phrase = DELETE_FILLER_PATTERN.sub("", phrase, count=1)
    phrase = TRAILING_PUNCTUATION_PATTERN.sub("", phrase).strip()
    return DeleteQuery(phrase=phrase)


def resolve_delete_target(text: str, inventory: Sequence[PantryItem]) -> DeleteTarget | ParseFailure:
    """Pick the inventory item a delete utterance refers to.

    Candidates are items whose name or location overlaps the phrase in either
    direction. Among several, the one expiring soonest wins; ties keep the
    snapshot order. The snapshot is never modified.

    Args:
        text: Raw utterance (e.g., "remove the yogurt")
        inventory: Ordered snapshot of current pantry items

    Returns:
        DeleteTarget with the chosen item id, or ParseFailure with
        EMPTY_DELETE_PHRASE or DELETE_NOT_FOUND
    """
    query = extract_delete_query(text)
    if query is None or not query.phrase:
        return ParseFailure(kind=ParseErrorKind.EMPTY_DELETE_PHRASE)

    candidates = containment_match_all(inventory, query.phrase)
    chosen = soonest_expiring(candidates)
    if chosen is None:
        logger.info("No pantry item matches delete phrase", extra={"phrase": query.phrase})
        return ParseFailure(kind=ParseErrorKind.DELETE_NOT_FOUND, detail=query.phrase)

    logger.debug(
        "Resolved delete target",
        extra={"phrase": query.phrase, "item_id": chosen.id, "candidates": len(candidates)},
    )
    return DeleteTarget(item_id=chosen.id)


def parse_command(
    text: str,
    *,
    inventory: Sequence[PantryItem] = (),
    today: date | None = None,
) -> AddCommand | DeleteTarget | ParseFailure:
    """Interpret one utterance as an add or delete command.

    Args:
        text: Raw utterance
        inventory: Current pantry snapshot, used only for deletions
        today: Reference date for relative expressions

    Returns:
        AddCommand, DeleteTarget, or ParseFailure
    """
    if classify_command(text) is CommandAction.DELETE:
        return resolve_delete_target(text, inventory)
    return parse_add_command(text, today=today)
