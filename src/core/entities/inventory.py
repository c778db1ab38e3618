"""Inventory domain entities."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

# Largest value an SQLite INTEGER column can hold.
MAX_STORED_INT = 2**63 - 1


def fits_stored_int(value: int) -> bool:
    return -MAX_STORED_INT - 1 <= value <= MAX_STORED_INT


def utc_now() -> datetime:
    return datetime.now(UTC)


def normalize_name(name: str) -> str:
    """Matching key for item names: trimmed and case-folded."""
    return " ".join(name.split()).casefold()


class MovementType(str, Enum):
    """Direction of a stock movement."""

    IN = "in"
    OUT = "out"


class ItemStatus(str, Enum):
    """Stock level relative to the item's minimum quantity."""

    IN_STOCK = "in-stock"
    LOW_STOCK = "low-stock"
    OUT_OF_STOCK = "out-of-stock"


class Item(BaseModel):
    """A catalog item and its quantity on hand."""

    id: int | None = None
    name: str
    description: str = ""
    category: str = ""
    quantity: int = Field(default=0, ge=0)
    min_quantity: int = Field(default=0, ge=0)
    unit: str = "pcs"
    version: int = 0  # bumped on every quantity change
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.name)

    @property
    def status(self) -> ItemStatus:
        if self.quantity > self.min_quantity:
            return ItemStatus.IN_STOCK
        if self.quantity > 0:
            return ItemStatus.LOW_STOCK
        return ItemStatus.OUT_OF_STOCK


class StockMovement(BaseModel):
    """Immutable audit record of one quantity change."""

    id: int | None = None
    item_id: int  # FK → items.id
    movement_type: MovementType
    quantity: int = Field(gt=0)  # always positive, direction is movement_type
    unit: str = "pcs"
    notes: str | None = None
    created_by: int | None = None
    created_at: datetime = Field(default_factory=utc_now)
    item_name: str | None = None  # populated on reads

    @property
    def signed_quantity(self) -> int:
        return self.quantity if self.movement_type == MovementType.IN else -self.quantity


class StockSummary(BaseModel):
    """Movement totals for one item."""

    item_id: int
    item_name: str
    unit: str
    total_in: int = 0
    total_out: int = 0
    total_transactions: int = 0
    last_transaction: datetime | None = None


class MovementFilter(BaseModel):
    """History query parameters."""

    item_id: int | None = None
    movement_type: MovementType | None = None
    limit: int = 50
    offset: int = 0
