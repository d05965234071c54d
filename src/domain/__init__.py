"""Domain models and DTOs."""

from src.domain.pantry import (
    AddCommand,
    CommandAction,
    DeleteQuery,
    DeleteTarget,
    ExpirationMeta,
    ExpirationTone,
    PantryItem,
    ParseErrorKind,
    ParseFailure,
)


__all__ = [
    "AddCommand",
    "CommandAction",
    "DeleteQuery",
    "DeleteTarget",
    "ExpirationMeta",
    "ExpirationTone",
    "PantryItem",
    "ParseErrorKind",
    "ParseFailure",
]
