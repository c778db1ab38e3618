"""
Stock operation service.

Validates and applies single stock-in / stock-out requests. Each quantity change
is a compare-and-swap against the item's version followed by a history append,
both performed by the store in one transaction. Version conflicts are retried
with a fresh read of the item.
"""

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.config import get_logger
from src.core.entities.inventory import MAX_STORED_INT, Item, MovementType, StockMovement
from src.core.exceptions import (
    ConcurrentUpdateError,
    InsufficientStockError,
    InvalidQuantityError,
    ItemNotFoundError,
)
from src.core.interfaces.inventory_store import IInventoryStore


def coerce_quantity(
    value: Any,
    *,
    allow_zero: bool = False,
    allow_negative: bool = False,
) -> int:
    """
    Convert a user-supplied quantity to an int.

    Accepts ints, integral floats and numeric strings ("12", " 12.0 ").
    Booleans, fractions and anything non-numeric raise InvalidQuantityError.
    """
    if value is None or isinstance(value, bool):
        raise InvalidQuantityError(value, "must be a number")

    if isinstance(value, int):
        number = value
    else:
        try:
            parsed = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidQuantityError(value, "must be a number") from None
        if parsed.is_finite() and abs(parsed) > MAX_STORED_INT:
            raise InvalidQuantityError(value, "is too large")
        if not parsed.is_finite() or parsed != parsed.to_integral_value():
            raise InvalidQuantityError(value, "must be a whole number")
        number = int(parsed)

    if number < 0 and not allow_negative:
        raise InvalidQuantityError(value, "must not be negative")
    if number == 0 and not allow_zero:
        raise InvalidQuantityError(value, "must not be zero")
    if abs(number) > MAX_STORED_INT:
        raise InvalidQuantityError(value, "is too large")
    return number


@dataclass
class StockOperation:
    """A single stock-in or stock-out request."""

    item_id: int
    quantity: Any
    notes: str | None = None
    unit: str | None = None
    created_by: int | None = None


@dataclass
class MovementRecord:
    """Outcome of a quantity change."""

    item: Item  # state after the change
    movement: StockMovement | None  # None when nothing changed
    previous_quantity: int

    @property
    def new_quantity(self) -> int:
        return self.item.quantity

    @property
    def changed(self) -> bool:
        return self.movement is not None


class StockOperationService:
    """
    Applies stock movements against the inventory store.

    Pure service: the store and logger are injected, nothing is looked up
    from global state.
    """

    def __init__(
        self,
        inventory_store: IInventoryStore,
        *,
        max_attempts: int = 5,
        retry_delay: float = 0.05,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self._store = inventory_store
        self._max_attempts = max(1, max_attempts)
        self._retry_delay = retry_delay
        self._logger = logger or get_logger(__name__)

    async def record_stock_in(self, operation: StockOperation) -> MovementRecord:
        """Increase an item's quantity and log an IN movement."""
        quantity = coerce_quantity(operation.quantity)
        record = await self._change_quantity(
            operation.item_id,
            lambda item: quantity,
            notes=operation.notes,
            unit=operation.unit,
            created_by=operation.created_by,
        )
        self._logger.info(
            "stock_in_recorded",
            item_id=record.item.id,
            quantity=quantity,
            new_quantity=record.new_quantity,
        )
        return record

    async def record_stock_out(self, operation: StockOperation) -> MovementRecord:
        """Decrease an item's quantity and log an OUT movement.

        Raises:
            InsufficientStockError: If ``quantity`` exceeds the quantity on hand.
        """
        quantity = coerce_quantity(operation.quantity)

        def take(item: Item) -> int:
            if quantity > item.quantity:
                raise InsufficientStockError(
                    item_id=item.id,  # type: ignore[arg-type]
                    requested=quantity,
                    available=item.quantity,
                )
            return -quantity

        record = await self._change_quantity(
            operation.item_id,
            take,
            notes=operation.notes,
            unit=operation.unit,
            created_by=operation.created_by,
        )
        self._logger.info(
            "stock_out_recorded",
            item_id=record.item.id,
            quantity=quantity,
            new_quantity=record.new_quantity,
        )
        return record

    async def set_quantity(
        self,
        item_id: int,
        target: Any,
        *,
        notes: str | None = None,
        created_by: int | None = None,
    ) -> MovementRecord:
        """
        Bring an item to an absolute quantity.

        The delta is recomputed against the current quantity on every attempt,
        so a concurrent change never makes the item miss its target. A zero
        delta writes nothing.
        """
        target_quantity = coerce_quantity(target, allow_zero=True)
        return await self._change_quantity(
            item_id,
            lambda item: target_quantity - item.quantity,
            notes=notes,
            created_by=created_by,
        )

    async def _change_quantity(
        self,
        item_id: int,
        delta_for: Callable[[Item], int],
        *,
        notes: str | None = None,
        unit: str | None = None,
        created_by: int | None = None,
    ) -> MovementRecord:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(
                multiplier=self._retry_delay,
                min=self._retry_delay,
                max=self._retry_delay * 8,
            ),
            retry=retry_if_exception_type(ConcurrentUpdateError),
            before_sleep=self._log_retry,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                record = await self._change_once(
                    item_id, delta_for, notes=notes, unit=unit, created_by=created_by
                )
        return record

    async def _change_once(
        self,
        item_id: int,
        delta_for: Callable[[Item], int],
        *,
        notes: str | None,
        unit: str | None,
        created_by: int | None,
    ) -> MovementRecord:
        item = await self._store.get_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id=item_id)

        delta = delta_for(item)
        if delta == 0:
            return MovementRecord(item=item, movement=None, previous_quantity=item.quantity)

        new_quantity = item.quantity + delta
        if new_quantity < 0:
            raise InsufficientStockError(
                item_id=item_id,
                requested=-delta,
                available=item.quantity,
            )
        if new_quantity > MAX_STORED_INT:
            raise InvalidQuantityError(delta, "would exceed the largest storable quantity")

        movement = StockMovement(
            item_id=item_id,
            movement_type=MovementType.IN if delta > 0 else MovementType.OUT,
            quantity=abs(delta),
            unit=unit or item.unit,
            notes=notes,
            created_by=created_by,
        )
        updated, saved = await self._store.apply_movement(
            movement,
            expected_version=item.version,
            new_quantity=new_quantity,
        )
        return MovementRecord(item=updated, movement=saved, previous_quantity=item.quantity)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        self._logger.warning(
            "stock_update_conflict_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )
