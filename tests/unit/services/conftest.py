"""Pytest configuration for unit service tests.

Services are exercised against an in-memory store that honours the same
compare-and-swap contract as the SQLite store.
"""

import pytest

from src.core.entities import Item, MovementFilter, StockMovement, StockSummary, normalize_name
from src.core.exceptions import ConcurrentUpdateError, DuplicateItemError, ItemNotFoundError
from src.core.interfaces import IInventoryStore
from src.core.services import BulkReconciliationEngine, StockOperationService


class InMemoryInventoryStore(IInventoryStore):
    """Dict-backed IInventoryStore."""

    def __init__(self):
        self.items: dict[int, Item] = {}
        self.movements: list[StockMovement] = []
        self._next_id = 1

    def add(self, name: str, quantity: int = 0, min_quantity: int = 0, unit: str = "pcs") -> Item:
        item = Item(
            id=self._next_id,
            name=name,
            quantity=quantity,
            min_quantity=min_quantity,
            unit=unit,
        )
        self.items[item.id] = item  # type: ignore[index]
        self._next_id += 1
        return item

    async def create_item(self, item: Item) -> Item:
        return (await self.create_items([item]))[0]

    async def create_items(self, items: list[Item]) -> list[Item]:
        taken = {i.normalized_name for i in self.items.values()}
        for item in items:
            if item.normalized_name in taken:
                raise DuplicateItemError(item.name)
            taken.add(item.normalized_name)
        for item in items:
            item.id = self._next_id
            self._next_id += 1
            self.items[item.id] = item
        return items

    async def get_item(self, item_id: int) -> Item | None:
        item = self.items.get(item_id)
        return item.model_copy() if item else None

    async def get_item_by_name(self, name: str) -> Item | None:
        key = normalize_name(name)
        for item in self.items.values():
            if item.normalized_name == key:
                return item.model_copy()
        return None

    async def list_items(self, limit: int = 100, offset: int = 0) -> list[Item]:
        ordered = sorted(self.items.values(), key=lambda i: i.normalized_name)
        return [i.model_copy() for i in ordered[offset : offset + limit]]

    async def apply_movement(
        self,
        movement: StockMovement,
        expected_version: int,
        new_quantity: int,
    ) -> tuple[Item, StockMovement]:
        current = self.items.get(movement.item_id)
        if current is None:
            raise ItemNotFoundError(item_id=movement.item_id)
        if current.version != expected_version:
            raise ConcurrentUpdateError(movement.item_id, expected_version)

        updated = current.model_copy(
            update={"quantity": new_quantity, "version": current.version + 1}
        )
        self.items[movement.item_id] = updated
        movement.id = len(self.movements) + 1
        movement.item_name = updated.name
        self.movements.append(movement)
        return updated.model_copy(), movement

    async def list_movements(self, filters: MovementFilter) -> list[StockMovement]:
        rows = [
            m
            for m in reversed(self.movements)
            if (filters.item_id is None or m.item_id == filters.item_id)
            and (filters.movement_type is None or m.movement_type == filters.movement_type)
        ]
        return rows[filters.offset : filters.offset + filters.limit]

    async def summarize(self) -> list[StockSummary]:
        return []

    def movements_for(self, item_id: int) -> list[StockMovement]:
        return [m for m in self.movements if m.item_id == item_id]


@pytest.fixture
def store() -> InMemoryInventoryStore:
    return InMemoryInventoryStore()


@pytest.fixture
def stock_service(store) -> StockOperationService:
    return StockOperationService(store, max_attempts=3, retry_delay=0)


@pytest.fixture
def engine(store, stock_service) -> BulkReconciliationEngine:
    return BulkReconciliationEngine(store, stock_service, max_rows=50)
