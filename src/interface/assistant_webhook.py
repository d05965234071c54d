"""Voice assistant (Google Actions) webhook endpoint.

The assistant platform sends already-structured slot values, so adds are built
directly from slots instead of going through the command parser. The resulting
AddCommand has the same shape and defaults as a parsed one.
"""

import logging
from datetime import date, timedelta
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from src.core import message_templates
from src.core.config import settings
from src.core.db_client import DatabaseError
from src.core.logging import log_with_context
from src.domain.pantry import AddCommand
from src.services import pantry_service


router = APIRouter(prefix="/api/google-assistant", tags=["assistant"])
logger = logging.getLogger(__name__)


class _NamedRef(BaseModel):
    name: str = ""


class _Session(BaseModel):
    id: str = ""
    params: dict[str, Any] = Field(default_factory=dict)


class AssistantRequest(BaseModel):
    """Subset of the Actions webhook request this endpoint reads."""

    handler: _NamedRef | None = None
    intent: _NamedRef | None = None
    session: _Session | None = None

    @property
    def handler_name(self) -> str:
        for ref in (self.handler, self.intent):
            if ref and ref.name:
                return ref.name
        return "unknown"

    @property
    def params(self) -> dict[str, Any]:
        return self.session.params if self.session else {}


def _prompt(
    speech: str,
    text: str | None = None,
    *,
    suggestions: list[str] | None = None,
    canvas: dict[str, Any] | None = None,
) -> JSONResponse:
    """Wrap speech and display text in an Actions prompt response."""
    prompt: dict[str, Any] = {"firstSimple": {"speech": speech, "text": text or speech}}
    if suggestions:
        prompt["suggestions"] = [{"title": title} for title in suggestions]

    content: dict[str, Any] = {"prompt": prompt}
    if canvas is not None:
        content["canvas"] = {"state": True, "json": canvas}
    return JSONResponse(content=content)


def _parse_int(value: Any) -> int | None:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _parse_slot_date(value: Any) -> date | None:
    """Read a date slot given either as "YYYY-MM-DD" or as {"year", "month", "day"}."""
    try:
        if isinstance(value, dict):
            return date(int(value["year"]), int(value["month"]), int(value["day"]))
        if isinstance(value, str) and value:
            return date.fromisoformat(value[:10])
    except (KeyError, TypeError, ValueError):
        logger.warning("Ignoring unreadable expiration slot", extra={"value": str(value)})
    return None


def build_add_command_from_slots(params: dict[str, Any], *, today: date | None = None) -> AddCommand | None:
    """Build an AddCommand from assistant slot values.

    Slots: item_name/name, quantity, expiration_date/expiry, days, location.
    Quantity defaults to 1; without an explicit date the item expires after
    `days` days (settings.default_expiry_days when absent).

    Returns:
        AddCommand, or None when no item name was given
    """
    name = str(params.get("item_name") or params.get("name") or "").strip()
    if not name:
        return None

    today = today or date.today()
    quantity = _parse_int(params.get("quantity")) or 1

    expiration_date = _parse_slot_date(params.get("expiration_date") or params.get("expiry"))
    if expiration_date is None:
        days = _parse_int(params.get("days")) or settings.default_expiry_days
        try:
            expiration_date = today + timedelta(days=days)
        except OverflowError:
            logger.warning("Ignoring out-of-range days slot", extra={"days": days})
            expiration_date = today + timedelta(days=settings.default_expiry_days)

    return AddCommand(
        name=name,
        quantity=max(quantity, 1),
        expiration_date=expiration_date,
        location=params.get("location") or None,
    )


def handle_main() -> JSONResponse:
    return _prompt(
        message_templates.WELCOME_SPEECH,
        message_templates.WELCOME_TEXT,
        suggestions=["What's in my pantry?", "Add item", "Remove item"],
    )


async def handle_list_pantry() -> JSONResponse:
    """Read out the pantry, warning about items expiring soon."""
    try:
        items = await pantry_service.list_items(limit=settings.voice_list_limit)
    except DatabaseError as e:
        logger.error("Failed to list pantry for assistant", extra={"error": str(e)})
        return _prompt(message_templates.PANTRY_UNAVAILABLE_SPEECH, "Error accessing pantry.")

    if not items:
        return _prompt(message_templates.EMPTY_PANTRY_SPEECH, "Your pantry is empty.")

    expiring_soon = [
        item
        for item in items
        if pantry_service.days_until_expiry(item.expiration_date) <= settings.expiring_soon_days
    ]

    return _prompt(
        message_templates.pantry_summary(items, expiring_soon),
        f"You have {len(items)} items.",
        suggestions=["What's expiring soon?", "Add item"],
        canvas={
            "items": [
                {
                    **item.model_dump(mode="json"),
                    "daysUntilExpiry": pantry_service.days_until_expiry(item.expiration_date),
                }
                for item in items
            ]
        },
    )


async def handle_add_item(params: dict[str, Any]) -> JSONResponse:
    """Add an item from slot values."""
    command = build_add_command_from_slots(params)
    if command is None:
        return _prompt(message_templates.ASK_ITEM_TO_ADD)

    try:
        item = await pantry_service.add_item(command)
    except DatabaseError as e:
        logger.error("Failed to add item from assistant", extra={"error": str(e)})
        return _prompt(message_templates.ADD_FAILED_SPEECH, "Failed to add item.")

    return _prompt(message_templates.item_added(item), f"Added {item.name}.")


async def handle_remove_item(params: dict[str, Any]) -> JSONResponse:
    """Remove the soonest-expiring item matching the spoken name."""
    name = str(params.get("item_name") or params.get("name") or "").strip()
    if not name:
        return _prompt(message_templates.ASK_ITEM_TO_REMOVE_SPEECH, "Which item?")

    try:
        removed = await pantry_service.remove_item_by_name(item_name=name)
    except (DatabaseError, KeyError) as e:
        logger.error("Failed to remove item from assistant", extra={"error": str(e)})
        return _prompt(message_templates.REMOVE_FAILED_SPEECH, "Failed to remove item.")

    if removed is None:
        return _prompt(message_templates.item_not_found(name), f"Can't find {name}.")

    return _prompt(message_templates.item_removed(removed), f"Removed {removed.name}.")


@router.post("")
async def receive_assistant_request(request: Request) -> JSONResponse:
    """Dispatch an assistant webhook call to the matching handler.

    Unknown handlers fall back to the welcome prompt. Malformed requests and
    handler failures get a generic apology rather than an HTTP error, since
    the assistant reads the prompt aloud.
    """
    try:
        body = AssistantRequest.model_validate(await request.json())
    except (ValueError, ValidationError) as e:
        logger.error("Invalid assistant request", extra={"error": str(e)})
        return _prompt(message_templates.GENERIC_FAILURE_SPEECH, message_templates.GENERIC_FAILURE_TEXT)

    handler = body.handler_name
    log_with_context(logger, "info", "Assistant request", handler=handler, params=sorted(body.params))

    try:
        match handler:
            case "list_pantry" | "ListPantryFulfillment":
                return await handle_list_pantry()
            case "add_item" | "AddItemFulfillment":
                return await handle_add_item(body.params)
            case "remove_item" | "RemoveItemFulfillment":
                return await handle_remove_item(body.params)
            case _:
                return handle_main()
    except Exception:
        logger.exception("Assistant handler failed", extra={"handler": handler})
        return _prompt(message_templates.GENERIC_FAILURE_SPEECH, message_templates.GENERIC_FAILURE_TEXT)
