"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from src.application.dto.requests import (
    BulkAdjustStockRow,
    BulkUpdateStockRow,
    CamelModel,
    CreateItemRequest,
    StockOperationRequest,
)
from src.application.dto.responses import (
    BulkCreateItemsResponse,
    BulkUpdateStockResponse,
    ComponentHealthResponse,
    ErrorResponse,
    FailedRowResponse,
    HealthResponse,
    ItemDataResponse,
    ItemListResponse,
    ItemResponse,
    SkippedRowResponse,
    StockHistoryResponse,
    StockMovementResponse,
    StockOperationResponse,
    StockSummaryListResponse,
    StockSummaryResponse,
    UpdatedRowResponse,
)

__all__ = [
    # Base
    "CamelModel",
    # Requests
    "StockOperationRequest",
    "BulkUpdateStockRow",
    "BulkAdjustStockRow",
    "CreateItemRequest",
    # Responses
    "ItemResponse",
    "ItemListResponse",
    "ItemDataResponse",
    "BulkCreateItemsResponse",
    "StockMovementResponse",
    "StockOperationResponse",
    "StockHistoryResponse",
    "StockSummaryResponse",
    "StockSummaryListResponse",
    "UpdatedRowResponse",
    "FailedRowResponse",
    "SkippedRowResponse",
    "BulkUpdateStockResponse",
    "ComponentHealthResponse",
    "HealthResponse",
    "ErrorResponse",
]
