"""Pantry REST API endpoints."""

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.core import message_templates
from src.core.config import constants, settings
from src.core.db_client import DatabaseError, RecordNotFoundError, UnstorableValueError
from src.core.errors import classify_storage_error, describe_parse_failure
from src.domain.pantry import AddCommand, CommandAction, PantryItem
from src.services import pantry_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/pantry", tags=["pantry"])


class CreateItemRequest(BaseModel):
    """Body of a structured add request."""

    name: str | None = Field(default=None, description="Item name")
    quantity: int | None = Field(default=None, description="Number of units (defaults to 1)")
    expiration_date: date | None = Field(default=None, description="Expiration date (YYYY-MM-DD)")
    location: str | None = Field(default=None, description="Storage location")


class CommandRequest(BaseModel):
    """Body of a natural-language command request."""

    text: str = Field(default="", description="Free-form command, e.g. '3 avocados in the fridge'")


def _serialize_item(item: PantryItem) -> dict[str, Any]:
    payload = item.model_dump(mode="json")
    payload["expiration"] = pantry_service.get_expiration_meta(item.expiration_date).model_dump(mode="json")
    return payload


def _storage_failure(e: Exception) -> HTTPException:
    error = classify_storage_error(e)
    logger.error("Pantry storage error", extra={"error": str(e), "code": error.code})
    if isinstance(e, KeyError):
        status_code = constants.HTTP_NOT_FOUND
    elif isinstance(e, UnstorableValueError):
        status_code = constants.HTTP_BAD_REQUEST
    else:
        status_code = constants.HTTP_SERVER_ERROR
    return HTTPException(status_code=status_code, detail=error.message)


@router.get("")
async def list_pantry(
    expiring: int | None = Query(
        default=None,
        ge=0,
        le=constants.MAX_EXPIRING_WINDOW_DAYS,
        description="Only items expiring within this many days",
    ),
    limit: int = Query(default=settings.default_list_limit, ge=1, le=constants.MAX_LIST_LIMIT),
) -> dict[str, list[dict[str, Any]]]:
    """List pantry items, soonest expiration first."""
    try:
        if expiring is not None:
            items = await pantry_service.list_expiring_items(within_days=expiring, limit=limit)
        else:
            items = await pantry_service.list_items(limit=limit)
    except DatabaseError as e:
        raise _storage_failure(e) from e

    return {"items": [_serialize_item(item) for item in items]}


@router.post("")
async def create_pantry_item(body: CreateItemRequest) -> dict[str, Any]:
    """Add a pantry item from structured fields."""
    if not body.name or not body.expiration_date:
        raise HTTPException(
            status_code=constants.HTTP_BAD_REQUEST,
            detail="Missing required fields: name, expiration_date",
        )

    command = AddCommand(
        name=body.name,
        quantity=max(body.quantity or 1, 1),
        expiration_date=body.expiration_date,
        location=body.location or None,
    )

    try:
        item = await pantry_service.add_item(command)
    except DatabaseError as e:
        raise _storage_failure(e) from e

    return {"item": _serialize_item(item), "message": "Item added successfully"}


@router.post("/command", response_model=None)
async def run_pantry_command(body: CommandRequest) -> dict[str, Any] | JSONResponse:
    """Apply a natural-language add or delete command.

    Returns 422 with a clarification message when the command could not be understood.
    """
    text = body.text.strip()
    if not text:
        raise HTTPException(status_code=constants.HTTP_BAD_REQUEST, detail="Missing command text")

    try:
        outcome = await pantry_service.handle_utterance(text)
    except (DatabaseError, RecordNotFoundError) as e:
        raise _storage_failure(e) from e

    if outcome.failure is not None:
        error = describe_parse_failure(outcome.failure)
        return JSONResponse(
            status_code=constants.HTTP_UNPROCESSABLE,
            content={"action": outcome.action, "reason": outcome.failure.kind, **error.model_dump(mode="json")},
        )

    assert outcome.item is not None
    if outcome.action is CommandAction.DELETE:
        message = message_templates.item_removed(outcome.item)
    else:
        message = message_templates.item_added(outcome.item)

    return {"action": outcome.action, "item": _serialize_item(outcome.item), "message": message}


@router.delete("/{item_id}")
async def delete_pantry_item(item_id: str) -> dict[str, str]:
    """Delete a pantry item by id."""
    try:
        await pantry_service.delete_item(item_id=item_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=constants.HTTP_NOT_FOUND, detail=f"Item not found: {item_id}") from e
    except DatabaseError as e:
        raise _storage_failure(e) from e

    return {"status": "deleted", "id": item_id}
