"""Entity to response DTO conversion shared by the use cases."""

from src.application.dto.responses import (
    BulkUpdateStockResponse,
    FailedRowResponse,
    ItemResponse,
    SkippedRowResponse,
    StockMovementResponse,
    StockSummaryResponse,
    UpdatedRowResponse,
)
from src.core.entities import BulkUpdateResult, Item, StockMovement, StockSummary


def item_to_response(item: Item) -> ItemResponse:
    return ItemResponse(
        id=item.id,  # type: ignore[arg-type]
        name=item.name,
        description=item.description,
        category=item.category,
        quantity=item.quantity,
        min_quantity=item.min_quantity,
        unit=item.unit,
        status=item.status.value,
        version=item.version,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def movement_to_response(movement: StockMovement) -> StockMovementResponse:
    return StockMovementResponse(
        id=movement.id,  # type: ignore[arg-type]
        item_id=movement.item_id,
        item_name=movement.item_name,
        type=movement.movement_type.value,
        quantity=movement.quantity,
        unit=movement.unit,
        notes=movement.notes,
        created_by=movement.created_by,
        created_at=movement.created_at,
    )


def summary_to_response(summary: StockSummary) -> StockSummaryResponse:
    return StockSummaryResponse(**summary.model_dump())


def bulk_result_to_response(
    result: BulkUpdateResult,
    quantity_key: str = "quantity",
) -> BulkUpdateStockResponse:
    """Tag each row outcome and count them.

    ``quantity_key`` renames the row quantity when echoing failed rows, so they
    read back the way the client sent them.
    """
    return BulkUpdateStockResponse(
        success=True,
        updated_count=result.updated_count,
        error_count=len(result.errors),
        results=[
            UpdatedRowResponse(
                id=row.id,
                name=row.name,
                old_quantity=row.old_quantity,
                new_quantity=row.new_quantity,
            )
            for row in result.results
        ],
        errors=[
            FailedRowResponse(
                item=_echo_row(err.item.reference(), quantity_key),
                error=err.error,
                error_code=err.error_code,
            )
            for err in result.errors
        ],
        skipped=[
            SkippedRowResponse(
                row_number=row.row_number,
                reason=row.reason,
                values=row.values,
            )
            for row in result.skipped
        ],
        skipped_count=len(result.skipped),
    )


def _echo_row(row: dict, quantity_key: str) -> dict:
    if quantity_key != "quantity" and "quantity" in row:
        row[quantity_key] = row.pop("quantity")
    return row
