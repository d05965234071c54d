"""Pantry service for inventory storage and natural-language commands."""

import logging
from datetime import date, timedelta
from typing import Any

from pydantic import BaseModel

from src.core import command_parser, db_client
from src.core.config import constants, settings
from src.core.logging import span
from src.domain.pantry import (
    AddCommand,
    CommandAction,
    ExpirationMeta,
    ExpirationTone,
    PantryItem,
    ParseFailure,
)


logger = logging.getLogger(__name__)

COLLECTION = "pantry_items"


class CommandOutcome(BaseModel):
    """What happened when a typed command was applied to the pantry."""

    action: CommandAction
    item: PantryItem | None = None
    failure: ParseFailure | None = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None


def _to_item(record: dict[str, Any]) -> PantryItem:
    return PantryItem.model_validate(record)


async def add_item(command: AddCommand) -> PantryItem:
    """Store a new pantry item.

    Args:
        command: Parsed or slot-built add command

    Returns:
        The stored pantry item
    """
    with span("pantry_service.add_item", item_name=command.name):
        record = await db_client.create_record(
            collection=COLLECTION,
            data={
                "name": command.name,
                "quantity": command.quantity,
                "expiration_date": command.expiration_date.isoformat(),
                "location": command.location,
            },
        )
        logger.info(
            "Added pantry item",
            extra={"item_id": record["id"], "item_name": command.name, "quantity": command.quantity},
        )
        return _to_item(record)


async def list_items(*, limit: int | None = None) -> list[PantryItem]:
    """Get pantry items, soonest expiration first.

    Args:
        limit: Maximum number of items (defaults to settings.default_list_limit)

    Returns:
        List of pantry items sorted by ascending expiration date
    """
    with span("pantry_service.list_items"):
        records = await db_client.list_records(
            collection=COLLECTION,
            per_page=limit or settings.default_list_limit,
            sort="+expiration_date",
        )

        logger.debug(f"Retrieved {len(records)} pantry items")
        return [_to_item(record) for record in records]


async def list_expiring_items(
    *,
    within_days: int,
    limit: int | None = None,
    today: date | None = None,
) -> list[PantryItem]:
    """Get items expiring between today and today + within_days (inclusive).

    Already-expired items are not included.

    Args:
        within_days: Size of the window in days
        limit: Maximum number of items
        today: Reference date (defaults to the local current date)

    Returns:
        List of pantry items sorted by ascending expiration date
    """
    with span("pantry_service.list_expiring_items", within_days=within_days):
        today = today or date.today()
        horizon = today + timedelta(days=within_days)

        records = await db_client.list_records(
            collection=COLLECTION,
            per_page=limit or settings.default_list_limit,
            filter_query=f'expiration_date >= "{today.isoformat()}" && expiration_date <= "{horizon.isoformat()}"',
            sort="+expiration_date",
        )

        logger.debug(f"Retrieved {len(records)} items expiring within {within_days} days")
        return [_to_item(record) for record in records]


async def get_item(*, item_id: str) -> PantryItem:
    """Get a single pantry item.

    Raises:
        RecordNotFoundError: If the item does not exist
    """
    with span("pantry_service.get_item", item_id=item_id):
        record = await db_client.get_record(collection=COLLECTION, record_id=item_id)
        return _to_item(record)


async def delete_item(*, item_id: str) -> None:
    """Delete a pantry item by id.

    Raises:
        RecordNotFoundError: If the item does not exist
    """
    with span("pantry_service.delete_item", item_id=item_id):
        await db_client.delete_record(collection=COLLECTION, record_id=item_id)
        logger.info("Deleted pantry item", extra={"item_id": item_id})


async def list_all_items() -> list[PantryItem]:
    """Get the whole inventory, soonest expiration first, paging through storage."""
    with span("pantry_service.list_all_items"):
        items: list[PantryItem] = []
        page = 1
        while True:
            records = await db_client.list_records(
                collection=COLLECTION,
                page=page,
                per_page=constants.MAX_LIST_LIMIT,
                sort="+expiration_date",
            )
            items.extend(_to_item(record) for record in records)
            if len(records) < constants.MAX_LIST_LIMIT:
                return items
            page += 1


async def remove_item_by_name(*, item_name: str) -> PantryItem | None:
    """Remove the soonest-expiring item whose name contains item_name.

    Args:
        item_name: Name, or part of a name, of the item to remove (case-insensitive)

    Returns:
        The removed item, or None if nothing matched
    """
    with span("pantry_service.remove_item_by_name", item_name=item_name):
        needle = item_name.strip()
        if not needle:
            return None

        records = await db_client.list_records(
            collection=COLLECTION,
            per_page=1,
            filter_query=f"name ~ {db_client.quote_filter_value(needle)}",
            sort="+expiration_date",
        )
        if not records:
            return None

        item = _to_item(records[0])
        await delete_item(item_id=item.id)
        return item


async def handle_utterance(text: str, *, today: date | None = None) -> CommandOutcome:
    """Interpret a typed command and apply it to the pantry.

    Adds store the parsed item. Deletes are resolved against a fresh snapshot of
    the inventory and remove the chosen item. Parse failures are returned in the
    outcome for the caller to turn into a clarification message.

    Args:
        text: Raw utterance (e.g., "3 avocados", "delete the shaved steak")
        today: Reference date for relative expressions

    Returns:
        CommandOutcome describing the applied mutation or the failure
    """
    with span("pantry_service.handle_utterance"):
        action = command_parser.classify_command(text)

        if action is CommandAction.DELETE:
            inventory = await list_all_items()
            target = command_parser.resolve_delete_target(text, inventory)
            if isinstance(target, ParseFailure):
                logger.info("Could not apply delete command", extra={"reason": target.kind})
                return CommandOutcome(action=action, failure=target)

            item = next(item for item in inventory if item.id == target.item_id)
            await delete_item(item_id=target.item_id)
            return CommandOutcome(action=action, item=item)

        command = command_parser.parse_add_command(text, today=today)
        if isinstance(command, ParseFailure):
            logger.info("Could not apply add command", extra={"reason": command.kind})
            return CommandOutcome(action=action, failure=command)

        item = await add_item(command)
        return CommandOutcome(action=action, item=item)


def days_until_expiry(expiration_date: date, *, today: date | None = None) -> int:
    """Whole days from today until the expiration date (negative once expired)."""
    today = today or date.today()
    return (expiration_date - today).days


def get_expiration_meta(expiration_date: date, *, today: date | None = None) -> ExpirationMeta:
    """Describe how urgent an item's expiration is.

    Returns:
        ExpirationMeta with a short label such as "Expires tomorrow" or "In 5 days"
    """
    days = days_until_expiry(expiration_date, today=today)

    if days < 0:
        return ExpirationMeta(days_until_expiry=days, label=f"Expired {abs(days)}d ago", tone=ExpirationTone.DANGER)
    if days == 0:
        return ExpirationMeta(days_until_expiry=days, label="Expires today", tone=ExpirationTone.WARNING)
    if days == 1:
        return ExpirationMeta(days_until_expiry=days, label="Expires tomorrow", tone=ExpirationTone.WARNING)

    tone = ExpirationTone.WARNING if days <= constants.EXPIRY_WARNING_WINDOW_DAYS else ExpirationTone.SAFE
    return ExpirationMeta(days_until_expiry=days, label=f"In {days} days", tone=tone)
