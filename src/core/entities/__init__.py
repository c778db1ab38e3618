"""Core domain entities."""

from src.core.entities.bulk import (
    BulkUpdateResult,
    BulkUpdateRow,
    ReconciledRow,
    RowError,
    SkippedRow,
)
from src.core.entities.inventory import (
    MAX_STORED_INT,
    Item,
    ItemStatus,
    MovementFilter,
    MovementType,
    StockMovement,
    StockSummary,
    fits_stored_int,
    normalize_name,
)

__all__ = [
    # Inventory
    "Item",
    "ItemStatus",
    "MovementType",
    "StockMovement",
    "StockSummary",
    "MovementFilter",
    "normalize_name",
    "MAX_STORED_INT",
    "fits_stored_int",
    # Bulk
    "BulkUpdateRow",
    "BulkUpdateResult",
    "ReconciledRow",
    "RowError",
    "SkippedRow",
]
