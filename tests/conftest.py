"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.main import app
from src.application.services import reset_services
from src.core.entities import Item


@pytest.fixture(autouse=True)
def _reset_singletons() -> Generator[None, None, None]:
    """Keep factory singletons from leaking between tests."""
    reset_services()
    yield
    reset_services()


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_item():
    """Factory for Item entities."""

    def _make(
        item_id: int = 1,
        name: str = "Widget",
        quantity: int = 10,
        min_quantity: int = 2,
        version: int = 0,
        unit: str = "pcs",
    ) -> Item:
        return Item(
            id=item_id,
            name=name,
            quantity=quantity,
            min_quantity=min_quantity,
            version=version,
            unit=unit,
        )

    return _make


@pytest.fixture
async def sqlite_env(tmp_path: Path) -> AsyncGenerator[Path, None]:
    """
    Migrated temporary database wired into the global connection pool.

    Yields the database path; the pool is closed afterwards.
    """
    import src.infrastructure.storage.sqlite as sqlite_pkg
    import src.infrastructure.storage.sqlite.connection as conn_module
    from src.infrastructure.storage.sqlite.migrations.migrator import initialize_database

    db_path = tmp_path / "stockroom_test.db"
    await initialize_database(db_path, create_backup_before=False)

    conn_module._pool = None
    sqlite_pkg._inventory_store = None
    mock_settings = MagicMock()
    mock_settings.storage.db_path = db_path
    mock_settings.storage.pool_size = 2
    mock_settings.storage.busy_timeout = 5000

    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield db_path
        finally:
            await conn_module.close_pool()
            sqlite_pkg._inventory_store = None
