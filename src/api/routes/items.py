"""Item catalog and bulk stock endpoints."""

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from src.api.dependencies import (
    get_bulk_adjust_stock_use_case,
    get_bulk_create_items_use_case,
    get_bulk_update_stock_use_case,
    get_create_item_use_case,
    get_import_stock_sheet_use_case,
    get_inv_item_store,
)
from src.application.dto.requests import (
    BulkAdjustStockRow,
    BulkUpdateStockRow,
    CreateItemRequest,
)
from src.application.dto.responses import (
    BulkCreateItemsResponse,
    BulkUpdateStockResponse,
    ErrorResponse,
    ItemListResponse,
    ItemResponse,
)
from src.application.use_cases import (
    BulkAdjustStockUseCase,
    BulkCreateItemsUseCase,
    BulkUpdateStockUseCase,
    CreateItemUseCase,
    ImportStockSheetUseCase,
)
from src.application.use_cases.mappers import item_to_response
from src.core.entities import MAX_STORED_INT
from src.core.exceptions import ItemNotFoundError
from src.infrastructure.storage.sqlite import SQLiteInventoryStore

router = APIRouter(prefix="/api/items", tags=["items"])


@router.get("", response_model=ItemListResponse)
async def list_items(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    store: SQLiteInventoryStore = Depends(get_inv_item_store),
) -> ItemListResponse:
    """List catalog items ordered by name."""
    items = await store.list_items(limit=limit, offset=offset)
    return ItemListResponse(
        data=[item_to_response(item) for item in items],
        total=len(items),
    )


@router.post(
    "",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_item(
    request: CreateItemRequest,
    use_case: CreateItemUseCase = Depends(get_create_item_use_case),
) -> ItemResponse:
    """Create a single item."""
    item = await use_case.execute(request)
    return use_case.to_response(item)


@router.post(
    "/bulk",
    response_model=BulkCreateItemsResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def bulk_create_items(
    items: list[CreateItemRequest],
    use_case: BulkCreateItemsUseCase = Depends(get_bulk_create_items_use_case),
) -> BulkCreateItemsResponse:
    """
    Create several items in one transaction.

    Items with a starting quantity get an initial stock-in movement.
    """
    created = await use_case.execute(items)
    return use_case.to_response(created)


@router.post(
    "/bulk-update-stock",
    response_model=BulkUpdateStockResponse,
    responses={400: {"model": ErrorResponse}},
)
async def bulk_update_stock(
    rows: list[BulkUpdateStockRow],
    user_id: int | None = Query(default=None, alias="userId", ge=0, le=MAX_STORED_INT),
    use_case: BulkUpdateStockUseCase = Depends(get_bulk_update_stock_use_case),
) -> BulkUpdateStockResponse:
    """
    Reconcile items to counted final quantities.

    Each row names an item by ``id`` or ``name``. Rows that fail are listed in
    ``errors`` and never block the other rows.
    """
    result = await use_case.execute(rows, user_id=user_id)
    return use_case.to_response(result)


@router.post(
    "/bulk-adjust-stock",
    response_model=BulkUpdateStockResponse,
    responses={400: {"model": ErrorResponse}},
)
async def bulk_adjust_stock(
    rows: list[BulkAdjustStockRow],
    user_id: int | None = Query(default=None, alias="userId", ge=0, le=MAX_STORED_INT),
    use_case: BulkAdjustStockUseCase = Depends(get_bulk_adjust_stock_use_case),
) -> BulkUpdateStockResponse:
    """Apply signed quantity deltas to many items."""
    result = await use_case.execute(rows, user_id=user_id)
    return use_case.to_response(result)


@router.post(
    "/import-stock",
    response_model=BulkUpdateStockResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse, "description": "File too large"},
        422: {"model": ErrorResponse, "description": "Unreadable spreadsheet"},
    },
)
async def import_stock(
    file: UploadFile = File(...),
    user_id: int | None = Query(default=None, alias="userId", ge=0, le=MAX_STORED_INT),
    use_case: ImportStockSheetUseCase = Depends(get_import_stock_sheet_use_case),
) -> BulkUpdateStockResponse:
    """
    Reconcile stock from an uploaded .xlsx, .xls or .csv count sheet.

    The sheet needs an ``id`` or ``name`` column and a final quantity column
    (``finalQuantity``, ``final_quantity``, ``quantity`` or ``final``). Rows
    without them are reported in ``skipped``.
    """
    content = await file.read(use_case.max_upload_size + 1)
    result = await use_case.execute(
        content, file.filename or "", user_id=user_id, declared_size=file.size
    )
    return use_case.to_response(result)


@router.get(
    "/{item_id}",
    response_model=ItemResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_item(
    item_id: int,
    store: SQLiteInventoryStore = Depends(get_inv_item_store),
) -> ItemResponse:
    """Get an item by ID."""
    item = await store.get_item(item_id)
    if item is None:
        raise ItemNotFoundError(item_id=item_id)
    return item_to_response(item)
