"""Stock movement endpoints."""

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    get_app_settings,
    get_inv_item_store,
    get_issue_stock_use_case,
    get_receive_stock_use_case,
)
from src.application.dto.requests import StockOperationRequest
from src.application.dto.responses import (
    ErrorResponse,
    ItemDataResponse,
    ItemListResponse,
    StockHistoryResponse,
    StockOperationResponse,
    StockSummaryListResponse,
)
from src.application.use_cases import IssueStockUseCase, ReceiveStockUseCase
from src.application.use_cases.mappers import (
    item_to_response,
    movement_to_response,
    summary_to_response,
)
from src.config import Settings
from src.core.entities import MAX_STORED_INT, MovementFilter, MovementType
from src.core.exceptions import ItemNotFoundError
from src.infrastructure.storage.sqlite import SQLiteInventoryStore

router = APIRouter(prefix="/api/stock", tags=["stock"])


@router.post(
    "/in",
    response_model=StockOperationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def stock_in(
    request: StockOperationRequest,
    use_case: ReceiveStockUseCase = Depends(get_receive_stock_use_case),
) -> StockOperationResponse:
    """Record incoming stock (IN movement)."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.post(
    "/out",
    response_model=StockOperationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid quantity or insufficient stock"},
        404: {"model": ErrorResponse},
    },
)
async def stock_out(
    request: StockOperationRequest,
    use_case: IssueStockUseCase = Depends(get_issue_stock_use_case),
) -> StockOperationResponse:
    """Record outgoing stock (OUT movement) with balance check."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("/available-items", response_model=ItemListResponse)
async def available_items(
    limit: int = Query(default=1000, ge=1, le=5000),
    offset: int = Query(default=0, ge=0),
    store: SQLiteInventoryStore = Depends(get_inv_item_store),
) -> ItemListResponse:
    """Items with their current quantity and stock status."""
    items = await store.list_items(limit=limit, offset=offset)
    return ItemListResponse(
        data=[item_to_response(item) for item in items],
        total=len(items),
    )


@router.get(
    "/item/{item_id}",
    response_model=ItemDataResponse,
    responses={404: {"model": ErrorResponse}},
)
async def stock_item(
    item_id: int,
    store: SQLiteInventoryStore = Depends(get_inv_item_store),
) -> ItemDataResponse:
    """Current stock of one item."""
    item = await store.get_item(item_id)
    if item is None:
        raise ItemNotFoundError(item_id=item_id)
    return ItemDataResponse(data=item_to_response(item))


@router.get("/history", response_model=StockHistoryResponse)
async def stock_history(
    item_id: int | None = Query(default=None, alias="itemId", le=MAX_STORED_INT),
    movement_type: MovementType | None = Query(default=None, alias="type"),
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    settings: Settings = Depends(get_app_settings),
    store: SQLiteInventoryStore = Depends(get_inv_item_store),
) -> StockHistoryResponse:
    """Stock movements, newest first."""
    page_size = min(
        limit or settings.inventory.history_default_limit,
        settings.inventory.history_max_limit,
    )
    movements = await store.list_movements(
        MovementFilter(
            item_id=item_id,
            movement_type=movement_type,
            limit=page_size,
            offset=offset,
        )
    )
    return StockHistoryResponse(
        data=[movement_to_response(m) for m in movements],
        limit=page_size,
        offset=offset,
    )


@router.get("/summary", response_model=StockSummaryListResponse)
async def stock_summary(
    store: SQLiteInventoryStore = Depends(get_inv_item_store),
) -> StockSummaryListResponse:
    """Per-item movement totals."""
    summaries = await store.summarize()
    return StockSummaryListResponse(data=[summary_to_response(s) for s in summaries])
