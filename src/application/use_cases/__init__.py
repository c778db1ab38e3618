"""Application use cases."""

from src.application.use_cases.bulk_create_items import BulkCreateItemsUseCase, CreateItemUseCase
from src.application.use_cases.bulk_update_stock import (
    BulkAdjustStockUseCase,
    BulkUpdateStockUseCase,
)
from src.application.use_cases.import_stock_sheet import ImportStockSheetUseCase
from src.application.use_cases.issue_stock import IssueStockUseCase
from src.application.use_cases.receive_stock import ReceiveStockUseCase

__all__ = [
    "ReceiveStockUseCase",
    "IssueStockUseCase",
    "BulkUpdateStockUseCase",
    "BulkAdjustStockUseCase",
    "ImportStockSheetUseCase",
    "BulkCreateItemsUseCase",
    "CreateItemUseCase",
]
