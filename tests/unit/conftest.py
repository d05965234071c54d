"""Pytest configuration and fixtures for unit tests."""

from collections.abc import Callable
from datetime import date

import pytest

from src.domain.pantry import PantryItem
from tests.unit.mocks import InMemoryDBClient


@pytest.fixture
def in_memory_db():
    """Provides a fresh InMemoryDBClient for each test."""
    return InMemoryDBClient()


@pytest.fixture
def patched_db(monkeypatch, in_memory_db):
    """Patches src.core.db_client functions to use InMemoryDBClient."""
    monkeypatch.setattr("src.core.db_client.create_record", in_memory_db.create_record)
    monkeypatch.setattr("src.core.db_client.get_record", in_memory_db.get_record)
    monkeypatch.setattr("src.core.db_client.delete_record", in_memory_db.delete_record)
    monkeypatch.setattr("src.core.db_client.list_records", in_memory_db.list_records)

    return in_memory_db


@pytest.fixture
def today() -> date:
    """Fixed reference date for date arithmetic."""
    return date(2026, 1, 15)


@pytest.fixture
def make_item() -> Callable[..., PantryItem]:
    """Factory for inventory snapshot items."""

    def _make(
        item_id: str,
        name: str,
        expiration_date: date,
        *,
        quantity: int = 1,
        location: str | None = None,
    ) -> PantryItem:
        return PantryItem(
            id=item_id,
            name=name,
            quantity=quantity,
            expiration_date=expiration_date,
            location=location,
        )

    return _make
