"""
Bulk stock use cases.

Reconciliation sets each item to a counted final quantity; adjustment applies
signed deltas. Both hand rows to the bulk reconciliation engine, which reports
per-row outcomes.
"""

from src.application.dto.requests import BulkAdjustStockRow, BulkUpdateStockRow
from src.application.dto.responses import BulkUpdateStockResponse
from src.application.use_cases.mappers import bulk_result_to_response
from src.config import get_logger
from src.core.entities import BulkUpdateResult, BulkUpdateRow
from src.core.services import BulkReconciliationEngine

logger = get_logger(__name__)


class _BulkStockUseCase:
    def __init__(self, engine: BulkReconciliationEngine | None = None):
        self._engine = engine

    async def _get_engine(self) -> BulkReconciliationEngine:
        if self._engine is None:
            from src.application.services import get_bulk_reconciliation_engine

            self._engine = await get_bulk_reconciliation_engine()
        return self._engine


class BulkUpdateStockUseCase(_BulkStockUseCase):
    """Reconcile items to final counted quantities."""

    async def execute(
        self,
        rows: list[BulkUpdateStockRow],
        user_id: int | None = None,
    ) -> BulkUpdateResult:
        """Execute bulk reconciliation.

        Raises:
            EmptyInputError: If ``rows`` is empty.
            ValidationError: If the batch is larger than allowed.
        """
        engine = await self._get_engine()
        result = await engine.apply_bulk_final_quantities(
            [BulkUpdateRow(id=row.id, name=row.name, quantity=row.quantity) for row in rows],
            created_by=user_id,
        )
        logger.info(
            "bulk_update_stock_complete",
            rows=len(rows),
            updated=result.updated_count,
            failed=len(result.errors),
        )
        return result

    def to_response(self, result: BulkUpdateResult) -> BulkUpdateStockResponse:
        """Convert result to API response."""
        return bulk_result_to_response(result)


class BulkAdjustStockUseCase(_BulkStockUseCase):
    """Apply signed quantity deltas to many items."""

    async def execute(
        self,
        rows: list[BulkAdjustStockRow],
        user_id: int | None = None,
    ) -> BulkUpdateResult:
        """Execute bulk adjustment."""
        engine = await self._get_engine()
        result = await engine.apply_bulk_deltas(
            [BulkUpdateRow(id=row.id, name=row.name, quantity=row.delta) for row in rows],
            created_by=user_id,
        )
        logger.info(
            "bulk_adjust_stock_complete",
            rows=len(rows),
            updated=result.updated_count,
            failed=len(result.errors),
        )
        return result

    def to_response(self, result: BulkUpdateResult) -> BulkUpdateStockResponse:
        """Convert result to API response."""
        return bulk_result_to_response(result, quantity_key="delta")
