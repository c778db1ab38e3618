"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers that change stock.
"""

from src.application.dto.requests import (
    BulkAdjustStockRow,
    BulkUpdateStockRow,
    CreateItemRequest,
    StockOperationRequest,
)
from src.application.dto.responses import (
    BulkCreateItemsResponse,
    BulkUpdateStockResponse,
    ErrorResponse,
    HealthResponse,
    ItemResponse,
    StockMovementResponse,
    StockOperationResponse,
    StockSummaryResponse,
)
from src.application.services import (
    get_bulk_reconciliation_engine,
    get_stock_operation_service,
    reset_services,
)
from src.application.use_cases import (
    BulkAdjustStockUseCase,
    BulkCreateItemsUseCase,
    BulkUpdateStockUseCase,
    CreateItemUseCase,
    ImportStockSheetUseCase,
    IssueStockUseCase,
    ReceiveStockUseCase,
)

__all__ = [
    # Request DTOs
    "StockOperationRequest",
    "BulkUpdateStockRow",
    "BulkAdjustStockRow",
    "CreateItemRequest",
    # Response DTOs
    "ItemResponse",
    "StockMovementResponse",
    "StockOperationResponse",
    "StockSummaryResponse",
    "BulkUpdateStockResponse",
    "BulkCreateItemsResponse",
    "HealthResponse",
    "ErrorResponse",
    # Use Cases
    "ReceiveStockUseCase",
    "IssueStockUseCase",
    "BulkUpdateStockUseCase",
    "BulkAdjustStockUseCase",
    "ImportStockSheetUseCase",
    "BulkCreateItemsUseCase",
    "CreateItemUseCase",
    # Service factories
    "get_stock_operation_service",
    "get_bulk_reconciliation_engine",
    "reset_services",
]
