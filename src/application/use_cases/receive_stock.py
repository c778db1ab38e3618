"""Receive Stock Use Case: IN movement."""

from src.application.dto.requests import StockOperationRequest
from src.application.dto.responses import StockOperationResponse
from src.application.use_cases.mappers import item_to_response, movement_to_response
from src.config import get_logger
from src.core.services import MovementRecord, StockOperation, StockOperationService

logger = get_logger(__name__)


class ReceiveStockUseCase:
    """Record stock coming into the warehouse."""

    def __init__(self, stock_service: StockOperationService | None = None):
        self._stock_service = stock_service

    async def _get_stock_service(self) -> StockOperationService:
        if self._stock_service is None:
            from src.application.services import get_stock_operation_service

            self._stock_service = await get_stock_operation_service()
        return self._stock_service

    async def execute(self, request: StockOperationRequest) -> MovementRecord:
        """Execute receive stock use case."""
        logger.info(
            "receive_stock_started",
            item_id=request.item_id,
            quantity=request.quantity,
        )

        service = await self._get_stock_service()
        return await service.record_stock_in(
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
            message="Stock in recorded successfully",
            data=movement_to_response(result.movement),  # type: ignore[arg-type]
            item=item_to_response(result.item),
            previous_quantity=result.previous_quantity,
        )
