"""Tests for InMemoryDBClient implementation."""

import pytest

from src.core.db_client import DatabaseError, RecordNotFoundError


@pytest.mark.unit
class TestInMemoryDBClient:
    """Test suite for InMemoryDBClient."""

    async def test_create_record(self, in_memory_db):
        """Test creating a record."""
        record = await in_memory_db.create_record("pantry_items", {"name": "Milk", "quantity": 2})

        assert record["id"] is not None
        assert record["name"] == "Milk"
        assert record["quantity"] == 2
        assert "created" in record

    async def test_create_record_generates_unique_ids(self, in_memory_db):
        record1 = await in_memory_db.create_record("pantry_items", {"name": "Milk"})
        record2 = await in_memory_db.create_record("pantry_items", {"name": "Eggs"})

        assert record1["id"] != record2["id"]

    async def test_create_record_invalid_data(self, in_memory_db):
        with pytest.raises(DatabaseError, match="Data must be a dictionary"):
            await in_memory_db.create_record("pantry_items", "invalid")

    async def test_get_record(self, in_memory_db):
        created = await in_memory_db.create_record("pantry_items", {"name": "Milk"})
        record = await in_memory_db.get_record("pantry_items", created["id"])

        assert record == created

    async def test_get_record_not_found(self, in_memory_db):
        with pytest.raises(RecordNotFoundError, match="Record not found"):
            await in_memory_db.get_record("pantry_items", "nonexistent")

    async def test_returned_records_are_copies(self, in_memory_db):
        created = await in_memory_db.create_record("pantry_items", {"name": "Milk"})
        created["name"] = "Changed"

        record = await in_memory_db.get_record("pantry_items", created["id"])
        assert record["name"] == "Milk"

    async def test_delete_record(self, in_memory_db):
        created = await in_memory_db.create_record("pantry_items", {"name": "Milk"})
        await in_memory_db.delete_record("pantry_items", created["id"])

        with pytest.raises(RecordNotFoundError):
            await in_memory_db.get_record("pantry_items", created["id"])

    async def test_delete_record_not_found(self, in_memory_db):
        with pytest.raises(RecordNotFoundError):
            await in_memory_db.delete_record("pantry_items", "nonexistent")

    async def test_list_records_filter_and_sort(self, in_memory_db):
        await in_memory_db.create_record("pantry_items", {"name": "Rice", "expiration_date": "2026-05-01"})
        await in_memory_db.create_record("pantry_items", {"name": "Milk", "expiration_date": "2026-01-20"})
        await in_memory_db.create_record("pantry_items", {"name": "Old Milk", "expiration_date": "2026-01-01"})

        records = await in_memory_db.list_records(
            "pantry_items",
            filter_query='name ~ "milk" && expiration_date >= "2026-01-10"',
            sort="+expiration_date",
        )
        assert [r["name"] for r in records] == ["Milk"]

        records = await in_memory_db.list_records("pantry_items", sort="-expiration_date")
        assert [r["name"] for r in records] == ["Rice", "Milk", "Old Milk"]

    async def test_list_records_pagination(self, in_memory_db):
        for i in range(5):
            await in_memory_db.create_record("pantry_items", {"name": f"Item {i}"})

        page1 = await in_memory_db.list_records("pantry_items", page=1, per_page=2)
        page3 = await in_memory_db.list_records("pantry_items", page=3, per_page=2)

        assert [r["name"] for r in page1] == ["Item 0", "Item 1"]
        assert [r["name"] for r in page3] == ["Item 4"]

    async def test_list_records_invalid_filter(self, in_memory_db):
        with pytest.raises(DatabaseError, match="Invalid filter syntax"):
            await in_memory_db.list_records("pantry_items", filter_query="name is milk")

    async def test_list_records_empty_collection(self, in_memory_db):
        assert await in_memory_db.list_records("pantry_items") == []
