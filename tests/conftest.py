"""Pytest configuration and shared fixtures."""

import logging
from collections.abc import AsyncIterator
from pathlib import Path

import pytest

from src.core import db_client
from src.core.config import settings


logger = logging.getLogger(__name__)


@pytest.fixture
async def sqlite_db(tmp_path: Path, monkeypatch) -> AsyncIterator[str]:
    """Provide a fresh SQLite database file with the schema applied."""
    db_path = str(tmp_path / "pantry_test.db")
    monkeypatch.setattr(settings, "sqlite_db_path", db_path)

    await db_client.init_db()
    logger.info(f"Initialized test database at {db_path}")

    yield db_path

    await db_client.close_connection()
