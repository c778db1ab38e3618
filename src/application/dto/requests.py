"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.

Field names are snake_case in Python and camelCase on the wire.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.core.entities import MAX_STORED_INT


class CamelModel(BaseModel):
    """Base for DTOs exchanged as camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Stock operations ---


class StockOperationRequest(CamelModel):
    """Request to record a stock-in or stock-out.

    ``quantity`` is validated by the stock service so that a bad value
    surfaces as INVALID_QUANTITY rather than a schema error.
    """

    item_id: int = Field(..., ge=1, le=MAX_STORED_INT, description="Item ID", examples=[1])
    quantity: Any = Field(..., description="Positive whole number of units", examples=[5])
    notes: str | None = Field(default=None, description="Free-text note")
    unit: str | None = Field(
        default=None,
        description="Unit of measure (defaults to the item's unit)",
        examples=["pcs", "box"],
    )
    user_id: int | None = Field(
        default=None, ge=0, le=MAX_STORED_INT, description="Acting user ID"
    )


# --- Bulk stock updates ---


class BulkUpdateStockRow(CamelModel):
    """One row of a reconciliation request: item reference plus final quantity."""

    id: int | str | None = Field(default=None, description="Item ID", examples=[1])
    name: str | None = Field(default=None, description="Item name (used when id is absent)")
    quantity: Any = Field(default=None, description="Final quantity on hand", examples=[20])


class BulkAdjustStockRow(CamelModel):
    """One row of an adjustment request: item reference plus signed delta."""

    id: int | str | None = Field(default=None, description="Item ID", examples=[1])
    name: str | None = Field(default=None, description="Item name (used when id is absent)")
    delta: Any = Field(default=None, description="Units to add (positive) or remove (negative)")


# --- Items ---


class CreateItemRequest(CamelModel):
    """Request to create a catalog item."""

    name: str = Field(..., min_length=1, max_length=200, description="Unique item name")
    description: str = Field(default="", description="Item description")
    category: str = Field(default="", description="Item category", examples=["electronics"])
    quantity: int = Field(
        default=0, ge=0, le=MAX_STORED_INT, description="Initial quantity on hand"
    )
    min_quantity: int = Field(
        default=0, ge=0, le=MAX_STORED_INT, description="Low-stock threshold"
    )
    unit: str | None = Field(default=None, description="Unit of measure", examples=["pcs"])
