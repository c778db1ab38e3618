"""
Core business logic services.

Layer-pure services that depend only on:
- src/core/entities/*
- src/core/interfaces/*
- src/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from src.core.services.bulk_reconciliation import BulkReconciliationEngine
from src.core.services.stock_import import NormalizedBatch, normalize_final_quantity_rows
from src.core.services.stock_operations import (
    MovementRecord,
    StockOperation,
    StockOperationService,
    coerce_quantity,
)

__all__ = [
    # Stock operations
    "StockOperationService",
    "StockOperation",
    "MovementRecord",
    "coerce_quantity",
    # Bulk reconciliation
    "BulkReconciliationEngine",
    # Spreadsheet import
    "NormalizedBatch",
    "normalize_final_quantity_rows",
]
