"""
Service factory functions for dependency injection.

This module provides factory functions that wire infrastructure
implementations to core services. Use cases should import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from src.config import get_logger, get_settings
from src.core.services import BulkReconciliationEngine, StockOperationService

if TYPE_CHECKING:
    from src.core.interfaces import IInventoryStore


# Singleton service instances
_stock_operation_service: StockOperationService | None = None
_bulk_reconciliation_engine: BulkReconciliationEngine | None = None


async def get_stock_operation_service(
    inventory_store: "IInventoryStore | None" = None,
) -> StockOperationService:
    """
    Get or create StockOperationService instance.

    Args:
        inventory_store: Optional inventory store override

    Returns:
        Configured StockOperationService
    """
    global _stock_operation_service

    if _stock_operation_service is not None and inventory_store is None:
        return _stock_operation_service

    # Lazy import infrastructure to avoid circular imports
    from src.infrastructure.storage.sqlite import get_inventory_store

    store = inventory_store or await get_inventory_store()
    settings = get_settings().inventory

    service = StockOperationService(
        store,
        max_attempts=settings.cas_max_attempts,
        retry_delay=settings.cas_retry_delay,
        logger=get_logger("src.core.services.stock_operations"),
    )

    if inventory_store is None:
        _stock_operation_service = service

    return service


async def get_bulk_reconciliation_engine(
    inventory_store: "IInventoryStore | None" = None,
    stock_service: StockOperationService | None = None,
) -> BulkReconciliationEngine:
    """
    Get or create BulkReconciliationEngine instance.

    Args:
        inventory_store: Optional inventory store override
        stock_service: Optional stock operation service override

    Returns:
        Configured BulkReconciliationEngine
    """
    global _bulk_reconciliation_engine

    overridden = inventory_store is not None or stock_service is not None
    if _bulk_reconciliation_engine is not None and not overridden:
        return _bulk_reconciliation_engine

    from src.infrastructure.storage.sqlite import get_inventory_store

    store = inventory_store or await get_inventory_store()
    stock = stock_service or await get_stock_operation_service(inventory_store)

    engine = BulkReconciliationEngine(
        store,
        stock,
        max_rows=get_settings().inventory.max_bulk_rows,
        logger=get_logger("src.core.services.bulk_reconciliation"),
    )

    if not overridden:
        _bulk_reconciliation_engine = engine

    return engine


def reset_services() -> None:
    """
    Reset all singleton service instances.

    Useful for testing or when configuration changes.
    """
    global _stock_operation_service
    global _bulk_reconciliation_engine

    _stock_operation_service = None
    _bulk_reconciliation_engine = None


__all__ = [
    # Factory functions
    "get_stock_operation_service",
    "get_bulk_reconciliation_engine",
    # Reset
    "reset_services",
]
