"""Item creation use cases."""

from src.application.dto.requests import CreateItemRequest
from src.application.dto.responses import BulkCreateItemsResponse, ItemResponse
from src.application.use_cases.mappers import item_to_response
from src.config import get_logger, get_settings
from src.core.entities import Item, normalize_name
from src.core.exceptions import DuplicateItemError, EmptyInputError, ValidationError
from src.core.interfaces.inventory_store import IInventoryStore

logger = get_logger(__name__)


class BulkCreateItemsUseCase:
    """
    Create several catalog items at once.

    All-or-nothing: a duplicate name, whether against existing items or within
    the batch, rejects the whole request.
    """

    def __init__(self, inventory_store: IInventoryStore | None = None):
        self._inventory_store = inventory_store

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from src.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def execute(self, requests: list[CreateItemRequest]) -> list[Item]:
        """Execute bulk create."""
        if not requests:
            raise EmptyInputError()

        settings = get_settings().inventory
        if len(requests) > settings.max_bulk_rows:
            raise ValidationError(
                field="items",
                message=f"At most {settings.max_bulk_rows} items per request, got {len(requests)}",
            )

        seen: set[str] = set()
        items = []
        for request in requests:
            item = _build_item(request, settings.default_unit)
            key = normalize_name(item.name)
            if key in seen:
                raise DuplicateItemError(item.name)
            seen.add(key)
            items.append(item)

        store = await self._get_inventory_store()
        created = await store.create_items(items)

        logger.info("bulk_create_items_complete", count=len(created))
        return created

    def to_response(self, items: list[Item]) -> BulkCreateItemsResponse:
        """Convert result to API response."""
        return BulkCreateItemsResponse(
            count=len(items),
            items=[item_to_response(item) for item in items],
        )


class CreateItemUseCase:
    """Create a single catalog item."""

    def __init__(self, inventory_store: IInventoryStore | None = None):
        self._inventory_store = inventory_store

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from src.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def execute(self, request: CreateItemRequest) -> Item:
        """Execute create item."""
        item = _build_item(request, get_settings().inventory.default_unit)
        store = await self._get_inventory_store()
        created = await store.create_item(item)
        logger.info("item_created", item_id=created.id, name=created.name)
        return created

    def to_response(self, item: Item) -> ItemResponse:
        """Convert result to API response."""
        return item_to_response(item)


def _build_item(request: CreateItemRequest, default_unit: str) -> Item:
    name = request.name.strip()
    if not name:
        raise ValidationError(field="name", message="must not be blank", value=request.name)
    return Item(
        name=name,
        description=request.description.strip(),
        category=request.category.strip(),
        quantity=request.quantity,
        min_quantity=request.min_quantity,
        unit=(request.unit or "").strip() or default_unit,
    )
