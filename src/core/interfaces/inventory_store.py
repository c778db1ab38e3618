"""Abstract interface for inventory storage."""

from abc import ABC, abstractmethod

from src.core.entities.inventory import Item, MovementFilter, StockMovement, StockSummary


class IInventoryStore(ABC):
    """
    Interface for item and stock movement persistence.

    Items are the only mutable shared resource. Quantity changes go through
    ``apply_movement`` exclusively, which couples the conditional quantity update
    with the history append.
    """

    @abstractmethod
    async def create_item(self, item: Item) -> Item:
        """Create a new item."""
        pass

    @abstractmethod
    async def create_items(self, items: list[Item]) -> list[Item]:
        """Create several items in one transaction.

        Items with a positive starting quantity get an initial IN movement.
        Raises DuplicateItemError if any name is taken.
        """
        pass

    @abstractmethod
    async def get_item(self, item_id: int) -> Item | None:
        """Get item by ID."""
        pass

    @abstractmethod
    async def get_item_by_name(self, name: str) -> Item | None:
        """Get item by trimmed, case-insensitive name."""
        pass

    @abstractmethod
    async def list_items(self, limit: int = 100, offset: int = 0) -> list[Item]:
        """List items ordered by name."""
        pass

    @abstractmethod
    async def apply_movement(
        self,
        movement: StockMovement,
        expected_version: int,
        new_quantity: int,
    ) -> tuple[Item, StockMovement]:
        """
        Set the item's quantity and append the movement atomically.

        The write only happens if the stored version still equals
        ``expected_version``; otherwise ConcurrentUpdateError is raised and
        nothing is written. Raises ItemNotFoundError if the item is gone.
        """
        pass

    @abstractmethod
    async def list_movements(self, filters: MovementFilter) -> list[StockMovement]:
        """List movements newest first."""
        pass

    @abstractmethod
    async def summarize(self) -> list[StockSummary]:
        """Per-item movement totals, one entry per item."""
        pass
