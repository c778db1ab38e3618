"""
Dependency injection container for FastAPI.

Provides service instances to route handlers.
"""

from functools import lru_cache

from src.application.use_cases import (
    BulkAdjustStockUseCase,
    BulkCreateItemsUseCase,
    BulkUpdateStockUseCase,
    CreateItemUseCase,
    ImportStockSheetUseCase,
    IssueStockUseCase,
    ReceiveStockUseCase,
)
from src.config import Settings, get_settings
from src.infrastructure.storage.sqlite import SQLiteInventoryStore, get_inventory_store


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Store dependencies
async def get_inv_item_store() -> SQLiteInventoryStore:
    """Get inventory store."""
    return await get_inventory_store()


# Stock operation use cases
def get_receive_stock_use_case() -> ReceiveStockUseCase:
    """Get receive stock use case."""
    return ReceiveStockUseCase()


def get_issue_stock_use_case() -> IssueStockUseCase:
    """Get issue stock use case."""
    return IssueStockUseCase()


# Bulk use cases
def get_bulk_update_stock_use_case() -> BulkUpdateStockUseCase:
    """Get bulk reconciliation use case."""
    return BulkUpdateStockUseCase()


def get_bulk_adjust_stock_use_case() -> BulkAdjustStockUseCase:
    """Get bulk adjustment use case."""
    return BulkAdjustStockUseCase()


def get_import_stock_sheet_use_case() -> ImportStockSheetUseCase:
    """Get spreadsheet import use case."""
    return ImportStockSheetUseCase()


# Catalog use cases
def get_bulk_create_items_use_case() -> BulkCreateItemsUseCase:
    """Get bulk create items use case."""
    return BulkCreateItemsUseCase()


def get_create_item_use_case() -> CreateItemUseCase:
    """Get create item use case."""
    return CreateItemUseCase()
