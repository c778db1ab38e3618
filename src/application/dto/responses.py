"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization. Every endpoint declares
one of these as its response model, so clients see an explicit shape per
endpoint and per bulk row outcome.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from src.application.dto.requests import CamelModel


# --- Items ---


class ItemResponse(CamelModel):
    """Catalog item response DTO."""

    id: int
    name: str
    description: str = ""
    category: str = ""
    quantity: int
    min_quantity: int
    unit: str
    status: str = Field(..., description="in-stock, low-stock or out-of-stock")
    version: int = Field(default=0, description="Concurrency token, bumped on every change")
    created_at: datetime
    updated_at: datetime


class ItemListResponse(CamelModel):
    """List of items."""

    data: list[ItemResponse]
    total: int = Field(..., description="Number of items returned")


class ItemDataResponse(CamelModel):
    """Single item wrapped in ``data``."""

    data: ItemResponse


class BulkCreateItemsResponse(CamelModel):
    """Response for bulk item creation."""

    count: int = Field(..., description="Number of items created")
    items: list[ItemResponse]


# --- Stock movements ---


class StockMovementResponse(CamelModel):
    """Stock movement response DTO."""

    id: int
    item_id: int
    item_name: str | None = None
    type: Literal["in", "out"]
    quantity: int
    unit: str
    notes: str | None = None
    created_by: int | None = None
    created_at: datetime


class StockOperationResponse(CamelModel):
    """Response for a stock-in or stock-out."""

    success: bool = True
    message: str
    data: StockMovementResponse = Field(..., description="The recorded movement")
    item: ItemResponse = Field(..., description="Item after the change")
    previous_quantity: int


class StockHistoryResponse(CamelModel):
    """Page of stock movements, newest first."""

    data: list[StockMovementResponse]
    limit: int
    offset: int


class StockSummaryResponse(CamelModel):
    """Movement totals for one item."""

    item_id: int
    item_name: str
    unit: str
    total_in: int = 0
    total_out: int = 0
    total_transactions: int = 0
    last_transaction: datetime | None = None


class StockSummaryListResponse(CamelModel):
    """Movement totals for every item."""

    data: list[StockSummaryResponse]


# --- Bulk stock updates ---


class UpdatedRowResponse(CamelModel):
    """A bulk row that was applied."""

    status: Literal["updated"] = "updated"
    id: int
    name: str
    old_quantity: int
    new_quantity: int


class FailedRowResponse(CamelModel):
    """A bulk row that was rejected."""

    status: Literal["error"] = "error"
    item: dict[str, Any] = Field(..., description="The row as submitted")
    error: str
    error_code: str


class SkippedRowResponse(CamelModel):
    """A spreadsheet row left out before reconciliation."""

    row_number: int = Field(..., description="1-based row number in the sheet")
    reason: str
    values: dict[str, Any] = Field(default_factory=dict)


class BulkUpdateStockResponse(CamelModel):
    """Aggregated outcome of a bulk stock call.

    ``success`` means the batch was processed; individual rows may still have
    failed and are listed in ``errors``.
    """

    success: bool = True
    updated_count: int
    error_count: int = 0
    results: list[UpdatedRowResponse] = Field(default_factory=list)
    errors: list[FailedRowResponse] = Field(default_factory=list)
    skipped: list[SkippedRowResponse] = Field(default_factory=list)
    skipped_count: int = 0


# --- Health & errors ---


class ComponentHealthResponse(CamelModel):
    """Health of one dependency."""

    name: str
    healthy: bool
    latency_ms: float | None = None
    pool_size: int | None = None
    idle_connections: int | None = None
    error: str | None = None


class HealthResponse(CamelModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ComponentHealthResponse | None = None


class ErrorResponse(CamelModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. ITEM_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    details: dict[str, Any] | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
