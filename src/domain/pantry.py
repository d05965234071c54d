"""Pantry domain models and enums."""

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, Field, field_serializer


class ParseErrorKind(StrEnum):
    """Recoverable reasons an utterance could not be turned into a command."""

    AMBIGUOUS_EXPIRY = "ambiguous-expiry"
    EMPTY_DELETE_PHRASE = "empty-delete-phrase"
    DELETE_NOT_FOUND = "delete-not-found"


class CommandAction(StrEnum):
    """Which inventory mutation an utterance asks for."""

    ADD = "add"
    DELETE = "delete"


class ExpirationTone(StrEnum):
    """Display urgency for an item's expiration."""

    DANGER = "danger"
    WARNING = "warning"
    SAFE = "safe"


class PantryItem(BaseModel):
    """Pantry item data transfer object."""

    id: str = Field(..., description="Unique item ID from storage")
    name: str = Field(..., description="Item name (e.g., 'Milk', 'Shaved Steak')")
    quantity: int = Field(default=1, description="How many units are stored")
    expiration_date: date = Field(..., description="Calendar date the item expires")
    location: str | None = Field(default=None, description="Where the item is kept (e.g., 'fridge')")
    created: str | None = Field(default=None, description="ISO timestamp of when the record was stored")

    @field_serializer("expiration_date")
    def _serialize_expiration(self, value: date) -> str:
        return value.isoformat()


class AddCommand(BaseModel):
    """Structured request to add one item, produced by a single parse call."""

    name: str = Field(..., min_length=1, description="Clean item name")
    quantity: int = Field(default=1, ge=1, description="Number of units to add")
    expiration_date: date = Field(..., description="Resolved expiration date")
    location: str | None = Field(default=None, description="Storage location, if the utterance named one")

    @field_serializer("expiration_date")
    def _serialize_expiration(self, value: date) -> str:
        return value.isoformat()


class DeleteQuery(BaseModel):
    """The free-text phrase a delete utterance refers to."""

    phrase: str = Field(..., description="Text after the delete/remove keyword and filler words")


class DeleteTarget(BaseModel):
    """Inventory item chosen by the delete resolver."""

    item_id: str


class ParseFailure(BaseModel):
    """An utterance the interpreter could not act on; the caller asks the user to rephrase."""

    kind: ParseErrorKind
    detail: str = ""


class ExpirationMeta(BaseModel):
    """Human label and urgency for an expiration date."""

    days_until_expiry: int
    label: str
    tone: ExpirationTone
