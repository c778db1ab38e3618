"""Issue Stock Use Case: OUT movement with balance check."""

from src.application.dto.requests import StockOperationRequest
from src.application.dto.responses import StockOperationResponse
from src.application.use_cases.mappers import item_to_response, movement_to_response
from src.config import get_logger
from src.core.services import MovementRecord, StockOperation, StockOperationService

logger = get_logger(__name__)


class IssueStockUseCase:
    """Record stock leaving the warehouse; never drives quantity below zero."""

    def __init__(self, stock_service: StockOperationService | None = None):
        self._stock_service = stock_service

    async def _get_stock_service(self) -> StockOperationService:
        if self._stock_service is None:
            from src.application.services import get_stock_operation_service

            self._stock_service = await get_stock_operation_service()
        return self._stock_service

    async def execute(self, request: StockOperationRequest) -> MovementRecord:
        """Execute issue stock use case.

        Raises:
            ItemNotFoundError: If the item doesn't exist.
            InvalidQuantityError: If quantity is not a positive whole number.
            InsufficientStockError: If quantity exceeds the quantity on hand.
        """
        logger.info(
            "issue_stock_started",
            item_id=request.item_id,
            quantity=request.quantity,
        )

        service = await self._get_stock_service()
        return await service.record_stock_out(
            StockOperation(
                item_id=request.item_id,
                quantity=request.quantity,
                notes=request.notes,
                unit=request.unit,
                created_by=request.user_id,
            )
        )

    def to_response(self, result: MovementRecord) -> StockOperationResponse:
        """Convert result to API response."""
        return StockOperationResponse(
            message="Stock out recorded successfully",
            data=movement_to_response(result.movement),  # type: ignore[arg-type]
            item=item_to_response(result.item),
            previous_quantity=result.previous_quantity,
        )
