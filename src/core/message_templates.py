"""Centralized message templates for pantry responses.

All user-facing message strings are defined here so wording can be
changed in one place for both the web API and the voice assistant.
"""

from collections.abc import Sequence

from src.domain.pantry import PantryItem


WELCOME_SPEECH = (
    "Welcome to Smart Pantry! You can ask me what's in your pantry, add items, or remove them. "
    "What would you like to do?"
)
WELCOME_TEXT = "Smart Pantry - Ask me what's in your pantry, add items, or remove them."
GENERIC_FAILURE_SPEECH = "Sorry, something went wrong with Smart Pantry."
GENERIC_FAILURE_TEXT = "Sorry, something went wrong. Try again."
PANTRY_UNAVAILABLE_SPEECH = "Sorry, I couldn't access your pantry right now."
EMPTY_PANTRY_SPEECH = "Your pantry is empty! Add some items to get started."
ASK_ITEM_TO_ADD = "What item would you like to add?"
ASK_ITEM_TO_REMOVE_SPEECH = "Which item would you like to remove?"
ADD_FAILED_SPEECH = "Sorry, I couldn't add that item. Please try again."
REMOVE_FAILED_SPEECH = "Sorry, I couldn't remove that item."


def item_added(item: PantryItem) -> str:
    location = f" in the {item.location}" if item.location else ""
    return f"Added {item.quantity} {item.name}{location}. It'll expire on {item.expiration_date.isoformat()}."


def item_removed(item: PantryItem) -> str:
    return f"Removed {item.name} from your pantry."


def item_not_found(name: str) -> str:
    return f"I couldn't find {name} in your pantry."


def pantry_summary(items: Sequence[PantryItem], expiring_soon: Sequence[PantryItem]) -> str:
    """Build the spoken pantry listing.

    Args:
        items: Items to read out, soonest expiration first
        expiring_soon: Subset of items that deserve a warning

    Returns:
        Sentence listing quantities and names, plus an expiry warning if needed
    """
    item_list = ", ".join(f"{item.quantity} {item.name}" for item in items)
    speech = f"You have {len(items)} items in your pantry: {item_list}."

    if expiring_soon:
        expiring_names = ", ".join(item.name for item in expiring_soon)
        speech += f" Warning: {expiring_names} are expiring soon!"

    return speech
