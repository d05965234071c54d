"""SQLite database client wrapper with CRUD operations."""

import asyncio
import json
import logging
import re
import threading
from datetime import date, datetime
from pathlib import Path
from typing import Any

import aiosqlite

from src.core.config import settings


logger = logging.getLogger(__name__)


class DatabaseError(RuntimeError):
    """Raised when a storage operation fails."""


class UnstorableValueError(DatabaseError):
    """Raised when a value cannot be represented in its column (e.g. an integer beyond 64 bits)."""


class RecordNotFoundError(KeyError):
    """Raised when a record id does not exist in a collection."""


def _validate_collection_name(collection: str) -> None:
    """Validate that a collection name contains only alphanumeric characters and underscores."""
    if not re.match(r"^[a-zA-Z_][a-zA-Z0-9_]*$", collection):
        msg = f"Invalid collection name: {collection}. Only alphanumeric characters and underscores are allowed."
        raise ValueError(msg)


def _convert_record_ids(record: dict[str, Any]) -> dict[str, Any]:
    """Convert the integer primary key to a string for Pydantic compatibility."""
    converted = record.copy()
    if isinstance(converted.get("id"), int):
        converted["id"] = str(converted["id"])
    return converted


def _to_db_value(value: Any) -> Any:
    """Convert Python values into something SQLite can store."""
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, dict | list):
        return json.dumps(value)
    return value


def get_db_path(db_path: str | None = None) -> Path:
    """Get the resolved SQLite database file path."""
    path_str = db_path or settings.sqlite_db_path
    return Path(path_str).resolve()


# Filter operator -> SQL operator. `~` is a case-insensitive "contains".
_SQL_OPERATORS = {
    "=": "=",
    "!=": "!=",
    ">": ">",
    "<": "<",
    ">=": ">=",
    "<=": "<=",
    "~": "LIKE",
}

# field op "value" or field op 'value'; a value may hold the other quote character
_COMPARISON_PATTERN = re.compile(r"""\s*(\w+)\s*(!=|>=|<=|=|>|<|~)\s*(?:"([^"]*)"|'([^']*)')\s*""")


def quote_filter_value(value: str) -> str:
    """Quote a value for a filter expression.

    Double quotes are used unless the value contains one. A value holding both
    quote characters has its double quotes dropped.
    """
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    cleaned = value.replace('"', "")
    return f'"{cleaned}"'


def parse_comparisons(filter_query: str) -> list[tuple[str, str, str]]:
    """Split `field op "value" && ...` into (field, op, value) triples.

    Raises:
        ValueError: If the expression does not follow the filter syntax
    """
    comparisons = []
    pos = 0
    while True:
        match = _COMPARISON_PATTERN.match(filter_query, pos)
        if not match:
            msg = f"Invalid filter syntax: {filter_query[pos:]}"
            raise ValueError(msg)

        field, op, double_quoted, single_quoted = match.groups()
        comparisons.append((field, op, double_quoted if double_quoted is not None else single_quoted))

        pos = match.end()
        if pos == len(filter_query):
            return comparisons
        if not filter_query.startswith("&&", pos):
            msg = f"Invalid filter syntax: {filter_query[pos:]}"
            raise ValueError(msg)
        pos += len("&&")


def _like_pattern(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _to_sql_condition(field: str, op: str, value: str) -> tuple[str, str | int]:
    """Turn one comparison into a SQL condition and its bound parameter.

    Values are compared as text except for `id`, which is an integer column.
    ISO dates therefore order correctly with the range operators.
    """
    sql_op = _SQL_OPERATORS[op]

    if sql_op == "LIKE":
        return f"{field} LIKE ? ESCAPE '\\'", _like_pattern(value)
    if field == "id" and value.isdigit():
        return f"id {sql_op} ?", int(value)
    return f"{field} {sql_op} ?", value


def parse_filter(filter_query: str) -> tuple[str, list[str | int]]:
    """Parse `field op "value" && ...` into a SQL WHERE clause and its parameters."""
    if not filter_query:
        return "", []

    parsed = [_to_sql_condition(*comparison) for comparison in parse_comparisons(filter_query)]
    return " AND ".join(cond for cond, _ in parsed), [value for _, value in parsed]


def _parse_sort(sort: str) -> str:
    """Translate `+field` / `-field` into an ORDER BY clause, ties broken by id."""
    if not sort:
        return "id ASC"

    match = re.match(r"^([+-]?)([A-Za-z_][A-Za-z0-9_]*)$", sort.strip())
    if not match:
        logger.warning("Invalid sort parameter, using default", extra={"sort": sort})
        return "id ASC"

    direction = "DESC" if match.group(1) == "-" else "ASC"
    return f"{match.group(2)} {direction}, id ASC"


# One connection per (thread, event loop, database file)
_db_connections: dict[tuple[int, int, str], aiosqlite.Connection] = {}
_db_lock = asyncio.Lock()


def _cache_key(db_path: str | None) -> tuple[int, int, str]:
    return threading.get_ident(), id(asyncio.get_running_loop()), str(get_db_path(db_path))


async def get_connection(*, db_path: str | None = None) -> aiosqlite.Connection:
    """Return the cached connection for this thread, loop and database file, opening it if needed."""
    key = _cache_key(db_path)
    conn = _db_connections.get(key)
    if conn is not None:
        return conn

    async with _db_lock:
        conn = _db_connections.get(key)
        if conn is not None:
            return conn

        path = Path(key[2])
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(str(path))
        await conn.execute("PRAGMA journal_mode = WAL")
        _db_connections[key] = conn

    logger.info("Opened SQLite connection", extra={"db_path": key[2]})
    return conn


async def close_connection(*, db_path: str | None = None) -> None:
    """Close the cached connection for this thread, loop and database file, if any."""
    conn = _db_connections.pop(_cache_key(db_path), None)
    if conn is None:
        return

    await conn.close()
    logger.info("Closed SQLite connection", extra={"db_path": str(get_db_path(db_path))})


async def init_db(*, db_path: str | None = None) -> None:
    """Create the pantry schema (see src.core.schema)."""
    from src.core import schema

    await schema.init_db(db_path=db_path)


async def create_record(*, collection: str, data: dict[str, Any]) -> dict[str, Any]:
    """Insert a new record and return it with its assigned id."""
    _validate_collection_name(collection)
    try:
        conn = await get_connection()

        columns = list(data.keys())
        columns_str = ", ".join(columns)
        placeholders_str = ", ".join("?" for _ in columns)
        values = [_to_db_value(data[key]) for key in columns]

        query = f"INSERT INTO {collection} ({columns_str}) VALUES ({placeholders_str})"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, values)
        await conn.commit()
        record_id = cursor.lastrowid
    except aiosqlite.Error as e:
        if isinstance(e, aiosqlite.OperationalError) and "no such table" in str(e):
            logger.error("Table not found", extra={"collection": collection})
            msg = f"Table '{collection}' does not exist. Call init_db() first."
            raise DatabaseError(msg) from e
        logger.error("create_record_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to create record in {collection}: {e}"
        raise DatabaseError(msg) from e
    except OverflowError as e:
        logger.warning("create_record_value_out_of_range", extra={"collection": collection, "error": str(e)})
        msg = f"Value out of range for {collection}: {e}"
        raise UnstorableValueError(msg) from e

    logger.info("Created record", extra={"collection": collection, "record_id": record_id})
    return await get_record(collection=collection, record_id=str(record_id))


async def get_record(*, collection: str, record_id: str) -> dict[str, Any]:
    """Fetch a single record by ID, raising RecordNotFoundError if not found."""
    _validate_collection_name(collection)
    if not record_id.isdigit():
        msg = f"Record not found in {collection}: {record_id}"
        raise RecordNotFoundError(msg)

    try:
        conn = await get_connection()

        query = f"SELECT * FROM {collection} WHERE id = ?"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, (int(record_id),))
        row = await cursor.fetchone()
        columns = [description[0] for description in cursor.description]
    except aiosqlite.Error as e:
        logger.error("get_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        msg = f"Failed to get record from {collection}: {e}"
        raise DatabaseError(msg) from e

    if row is None:
        msg = f"Record not found in {collection}: {record_id}"
        raise RecordNotFoundError(msg)

    return _convert_record_ids(dict(zip(columns, row, strict=True)))


async def delete_record(*, collection: str, record_id: str) -> None:
    """Delete a record by ID, raising RecordNotFoundError if not found."""
    _validate_collection_name(collection)
    if not record_id.isdigit():
        msg = f"Record not found in {collection}: {record_id}"
        raise RecordNotFoundError(msg)

    try:
        conn = await get_connection()

        query = f"DELETE FROM {collection} WHERE id = ?"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, (int(record_id),))
        await conn.commit()
    except aiosqlite.Error as e:
        logger.error("delete_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        msg = f"Failed to delete record from {collection}: {e}"
        raise DatabaseError(msg) from e

    if cursor.rowcount == 0:
        msg = f"Record not found in {collection}: {record_id}"
        raise RecordNotFoundError(msg)

    logger.info("Deleted record", extra={"collection": collection, "record_id": record_id})


async def list_records(
    *,
    collection: str,
    page: int = 1,
    per_page: int = 50,
    filter_query: str = "",
    sort: str = "",
) -> list[dict[str, Any]]:
    """List records with optional filtering, sorting (`+field`/`-field`), and pagination."""
    _validate_collection_name(collection)

    where_clause = ""
    params: list[Any] = []
    if filter_query:
        try:
            where_clause, params = parse_filter(filter_query)
        except ValueError as e:
            logger.error("list_records_invalid_filter", extra={"collection": collection, "filter": filter_query})
            raise DatabaseError(str(e)) from e
        where_clause = f"WHERE {where_clause}"

    order_by = _parse_sort(sort)
    offset = (page - 1) * per_page

    try:
        conn = await get_connection()

        query = f"SELECT * FROM {collection} {where_clause} ORDER BY {order_by} LIMIT ? OFFSET ?"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, [*params, per_page, offset])
        rows = await cursor.fetchall()
        columns = [description[0] for description in cursor.description]
    except aiosqlite.Error as e:
        logger.error("list_records_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to list records from {collection}: {e}"
        raise DatabaseError(msg) from e

    records = [_convert_record_ids(dict(zip(columns, row, strict=True))) for row in rows]
    logger.debug("Listed records", extra={"collection": collection, "count": len(records)})
    return records
