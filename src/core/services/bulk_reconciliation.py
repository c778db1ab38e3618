"""
Bulk reconciliation engine.

Applies a batch of rows, each naming an item by id or name, either as absolute
final quantities (reconciliation) or as signed deltas (adjustment). Rows are
processed in input order and independently: a row that fails resolution or
validation is recorded in ``errors`` and the batch moves on.
"""

from collections.abc import Awaitable, Callable, Sequence

import structlog

from src.config import get_logger
from src.core.entities.bulk import BulkUpdateResult, BulkUpdateRow, ReconciledRow, RowError
from src.core.entities.inventory import Item, fits_stored_int
from src.core.exceptions import (
    EmptyInputError,
    InventoryError,
    ItemNotFoundError,
    ValidationError,
)
from src.core.interfaces.inventory_store import IInventoryStore
from src.core.services.stock_operations import (
    StockOperation,
    StockOperationService,
    coerce_quantity,
)

RECONCILE_NOTE = "Stock reconciliation"
ADJUST_NOTE = "Bulk stock adjustment"


def _coerce_item_id(value: int | str) -> int | None:
    """Integer id for a row reference, or None when no stored item could have it."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        item_id = value
    else:
        text = str(value).strip()
        if not text.isdigit() or len(text) > 19:
            return None
        item_id = int(text)
    return item_id if fits_stored_int(item_id) else None


class BulkReconciliationEngine:
    """Resolves bulk rows to items and applies them through the stock service."""

    def __init__(
        self,
        inventory_store: IInventoryStore,
        stock_service: StockOperationService,
        *,
        max_rows: int = 1000,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self._store = inventory_store
        self._stock = stock_service
        self._max_rows = max_rows
        self._logger = logger or get_logger(__name__)

    async def apply_bulk_final_quantities(
        self,
        rows: Sequence[BulkUpdateRow],
        *,
        notes: str | None = None,
        created_by: int | None = None,
    ) -> BulkUpdateResult:
        """
        Reconcile each row's item to the row's final quantity.

        Args:
            rows: Rows whose ``quantity`` is the absolute target.
            notes: Movement note, defaults to "Stock reconciliation".
            created_by: Actor recorded on each movement.

        Returns:
            BulkUpdateResult with one entry per row in ``results`` or ``errors``.

        Raises:
            EmptyInputError: If ``rows`` is empty.
            ValidationError: If the batch exceeds the configured size.
        """

        async def reconcile(row: BulkUpdateRow) -> ReconciledRow:
            target = coerce_quantity(row.quantity, allow_zero=True)
            item = await self._resolve(row)
            record = await self._stock.set_quantity(
                item.id,  # type: ignore[arg-type]
                target,
                notes=notes or RECONCILE_NOTE,
                created_by=created_by,
            )
            return ReconciledRow(
                id=record.item.id,  # type: ignore[arg-type]
                name=record.item.name,
                old_quantity=record.previous_quantity,
                new_quantity=record.new_quantity,
            )

        return await self._run("reconcile", rows, reconcile)

    async def apply_bulk_deltas(
        self,
        rows: Sequence[BulkUpdateRow],
        *,
        notes: str | None = None,
        created_by: int | None = None,
    ) -> BulkUpdateResult:
        """
        Apply each row's ``quantity`` as a signed delta.

        Positive deltas are stock-ins, negative deltas stock-outs; a zero delta
        is an invalid row.
        """

        async def adjust(row: BulkUpdateRow) -> ReconciledRow:
            delta = coerce_quantity(row.quantity, allow_negative=True)
            item = await self._resolve(row)
            operation = StockOperation(
                item_id=item.id,  # type: ignore[arg-type]
                quantity=abs(delta),
                notes=notes or ADJUST_NOTE,
                created_by=created_by,
            )
            if delta > 0:
                record = await self._stock.record_stock_in(operation)
            else:
                record = await self._stock.record_stock_out(operation)
            return ReconciledRow(
                id=record.item.id,  # type: ignore[arg-type]
                name=record.item.name,
                old_quantity=record.previous_quantity,
                new_quantity=record.new_quantity,
            )

        return await self._run("adjust", rows, adjust)

    async def _run(
        self,
        mode: str,
        rows: Sequence[BulkUpdateRow],
        apply_row: Callable[[BulkUpdateRow], Awaitable[ReconciledRow]],
    ) -> BulkUpdateResult:
        if not rows:
            raise EmptyInputError()
        if len(rows) > self._max_rows:
            raise ValidationError(
                field="rows",
                message=f"At most {self._max_rows} rows per request, got {len(rows)}",
            )

        self._logger.info("bulk_update_started", mode=mode, rows=len(rows))
        result = BulkUpdateResult()

        for index, row in enumerate(rows):
            try:
                result.results.append(await apply_row(row))
            except InventoryError as e:
                self._logger.warning(
                    "bulk_update_row_failed",
                    mode=mode,
                    row=index,
                    error_code=e.code,
                    error=e.message,
                )
                result.errors.append(RowError(item=row, error=e.message, error_code=e.code))

        self._logger.info(
            "bulk_update_complete",
            mode=mode,
            updated=len(result.results),
            failed=len(result.errors),
        )
        return result

    async def _resolve(self, row: BulkUpdateRow) -> Item:
        """Find the row's item: by id when given, otherwise by name."""
        if row.id is not None and str(row.id).strip():
            item_id = _coerce_item_id(row.id)
            item = await self._store.get_item(item_id) if item_id is not None else None
            if item is None:
                raise ItemNotFoundError(item_id=row.id)
            return item

        name = (row.name or "").strip()
        if name:
            item = await self._store.get_item_by_name(name)
            if item is None:
                raise ItemNotFoundError(name=name)
            return item

        raise ItemNotFoundError()
