"""SQLite schema management (code-first approach)."""

import logging

from src.core import db_client


logger = logging.getLogger(__name__)


# Central list of all collections in the schema
COLLECTIONS = [
    "pantry_items",
]

_TABLE_DEFINITIONS: dict[str, list[str]] = {
    "pantry_items": [
        """
        CREATE TABLE IF NOT EXISTS pantry_items (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            quantity INTEGER NOT NULL DEFAULT 1 CHECK (quantity >= 1),
            expiration_date TEXT NOT NULL,
            location TEXT,
            created TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
        )
        """,
        "CREATE INDEX IF NOT EXISTS idx_pantry_expiration ON pantry_items (expiration_date)",
    ],
}


async def init_db(*, db_path: str | None = None) -> None:
    """Create all tables and indexes if they do not exist yet."""
    conn = await db_client.get_connection(db_path=db_path)

    for collection in COLLECTIONS:
        for statement in _TABLE_DEFINITIONS[collection]:
            await conn.execute(statement)
        logger.info("Ensured collection: %s", collection)

    await conn.commit()
