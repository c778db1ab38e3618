"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from src.core.entities import Item
from src.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def inventory_store(sqlite_env: Path) -> AsyncGenerator[SQLiteInventoryStore, None]:
    """Store over a freshly migrated database."""
    yield SQLiteInventoryStore()


@pytest.fixture
async def seeded_store(inventory_store: SQLiteInventoryStore) -> SQLiteInventoryStore:
    """Store holding three items; two of them start with stock."""
    await inventory_store.create_items(
        [
            Item(name="Item A", quantity=10, min_quantity=2),
            Item(name="Item B", quantity=5, min_quantity=5, unit="box"),
            Item(name="Printer Paper", quantity=0, min_quantity=10, unit="ream"),
        ]
    )
    return inventory_store
