"""Error classification utilities for command interpretation and storage errors."""

from enum import Enum

from pydantic import BaseModel

from src.core.db_client import UnstorableValueError
from src.domain.pantry import ParseErrorKind, ParseFailure


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    # Interpreter errors
    ERR_AMBIGUOUS_EXPIRY = "ERR_AMBIGUOUS_EXPIRY"
    ERR_EMPTY_DELETE_PHRASE = "ERR_EMPTY_DELETE_PHRASE"
    ERR_DELETE_NOT_FOUND = "ERR_DELETE_NOT_FOUND"

    # Storage errors
    ERR_ITEM_NOT_FOUND = "ERR_ITEM_NOT_FOUND"
    ERR_STORAGE_FAILURE = "ERR_STORAGE_FAILURE"
    ERR_VALUE_OUT_OF_RANGE = "ERR_VALUE_OUT_OF_RANGE"

    # Generic errors
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity


_PARSE_FAILURE_RESPONSES: dict[ParseErrorKind, ErrorResponse] = {
    ParseErrorKind.AMBIGUOUS_EXPIRY: ErrorResponse(
        code=ErrorCode.ERR_AMBIGUOUS_EXPIRY,
        message="I couldn't quite understand that.",
        suggestion="Try including the item and when it expires, e.g. \"milk expires in 5 days\".",
        severity=ErrorSeverity.LOW,
    ),
    ParseErrorKind.EMPTY_DELETE_PHRASE: ErrorResponse(
        code=ErrorCode.ERR_EMPTY_DELETE_PHRASE,
        message="Tell me which item to delete.",
        suggestion='For example: "delete the shaved steak".',
        severity=ErrorSeverity.LOW,
    ),
    ParseErrorKind.DELETE_NOT_FOUND: ErrorResponse(
        code=ErrorCode.ERR_DELETE_NOT_FOUND,
        message="I couldn't find an item that matches that description to delete.",
        suggestion="Check the item name or its location and try again.",
        severity=ErrorSeverity.LOW,
    ),
}


def describe_parse_failure(failure: ParseFailure) -> ErrorResponse:
    """Translate an interpreter failure into a clarification message for the user.

    Args:
        failure: The failure value returned by the command parser

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    return _PARSE_FAILURE_RESPONSES[failure.kind].model_copy()


def classify_storage_error(exception: Exception) -> ErrorResponse:
    """Classify a storage exception and return a structured response.

    Args:
        exception: The exception raised by the storage layer

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    if isinstance(exception, KeyError):
        return ErrorResponse(
            code=ErrorCode.ERR_ITEM_NOT_FOUND,
            message="That item is no longer in your pantry.",
            suggestion="Refresh the list and try again.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, UnstorableValueError):
        return ErrorResponse(
            code=ErrorCode.ERR_VALUE_OUT_OF_RANGE,
            message="That number is too large to store.",
            suggestion="Try a smaller quantity.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, RuntimeError | ConnectionError):
        return ErrorResponse(
            code=ErrorCode.ERR_STORAGE_FAILURE,
            message="I couldn't reach your pantry right now.",
            suggestion="Please try again in a moment.",
            severity=ErrorSeverity.HIGH,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later. If the problem persists, contact support.",
        severity=ErrorSeverity.MEDIUM,
    )
