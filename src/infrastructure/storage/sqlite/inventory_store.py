"""SQLite implementation of inventory storage."""

from datetime import datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.inventory import (
    Item,
    MovementFilter,
    MovementType,
    StockMovement,
    StockSummary,
    fits_stored_int,
    normalize_name,
    utc_now,
)
from src.core.exceptions import (
    ConcurrentUpdateError,
    DatabaseError,
    DuplicateItemError,
    ItemNotFoundError,
)
from src.core.interfaces.inventory_store import IInventoryStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

INITIAL_STOCK_NOTE = "Initial stock"

_MOVEMENT_COLUMNS = """
    m.id, m.item_id, m.movement_type, m.quantity, m.unit, m.notes,
    m.created_by, m.created_at, i.name AS item_name
"""


class SQLiteInventoryStore(IInventoryStore):
    """SQLite implementation of item and stock movement storage."""

    async def create_item(self, item: Item) -> Item:
        """Create a new item."""
        created = await self.create_items([item])
        return created[0]

    async def create_items(self, items: list[Item]) -> list[Item]:
        """Insert items and their initial stock movements in one transaction."""
        now = utc_now()
        try:
            async with get_transaction() as conn:
                for item in items:
                    item.created_at = now
                    item.updated_at = now
                    item.version = 0
                    await self._insert_item(conn, item)
                    if item.quantity > 0:
                        await self._insert_movement(
                            conn,
                            StockMovement(
                                item_id=item.id,  # type: ignore[arg-type]
                                movement_type=MovementType.IN,
                                quantity=item.quantity,
                                unit=item.unit,
                                notes=INITIAL_STOCK_NOTE,
                                created_at=now,
                            ),
                        )
        except (aiosqlite.Error, OverflowError) as e:
            raise DatabaseError("create_items", str(e)) from e

        logger.info("items_created", count=len(items))
        return items

    async def get_item(self, item_id: int) -> Item | None:
        """Get item by ID."""
        if not fits_stored_int(item_id):
            return None
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM items WHERE id = ?", (item_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_item(row)

    async def get_item_by_name(self, name: str) -> Item | None:
        """Get item by trimmed, case-insensitive name."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM items WHERE normalized_name = ?",
                (normalize_name(name),),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_item(row)

    async def list_items(self, limit: int = 100, offset: int = 0) -> list[Item]:
        """List items ordered by name."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM items
                ORDER BY normalized_name
                LIMIT ? OFFSET ?
                """,
                (limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_item(row) for row in rows]

    async def apply_movement(
        self,
        movement: StockMovement,
        expected_version: int,
        new_quantity: int,
    ) -> tuple[Item, StockMovement]:
        """Conditionally update the quantity and append the movement."""
        now = utc_now()
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    UPDATE items SET
                        quantity = ?,
                        version = version + 1,
                        updated_at = ?
                    WHERE id = ? AND version = ?
                    """,
                    (new_quantity, now.isoformat(), movement.item_id, expected_version),
                )
                if cursor.rowcount == 0:
                    cursor = await conn.execute(
                        "SELECT 1 FROM items WHERE id = ?", (movement.item_id,)
                    )
                    if await cursor.fetchone() is None:
                        raise ItemNotFoundError(item_id=movement.item_id)
                    raise ConcurrentUpdateError(movement.item_id, expected_version)

                movement.created_at = now
                await self._insert_movement(conn, movement)

                cursor = await conn.execute(
                    "SELECT * FROM items WHERE id = ?", (movement.item_id,)
                )
                item = self._row_to_item(await cursor.fetchone())
        except (aiosqlite.Error, OverflowError) as e:
            raise DatabaseError("apply_movement", str(e)) from e

        movement.item_name = item.name
        logger.info(
            "stock_movement_recorded",
            movement_id=movement.id,
            item_id=item.id,
            type=movement.movement_type.value,
            qty=movement.quantity,
            version=item.version,
        )
        return item, movement

    async def list_movements(self, filters: MovementFilter) -> list[StockMovement]:
        """List movements newest first, joined with the item name."""
        clauses = []
        params: list = []
        if filters.item_id is not None and not fits_stored_int(filters.item_id):
            return []
        if filters.item_id is not None:
            clauses.append("m.item_id = ?")
            params.append(filters.item_id)
        if filters.movement_type is not None:
            clauses.append("m.movement_type = ?")
            params.append(filters.movement_type.value)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.extend([filters.limit, filters.offset])

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT {_MOVEMENT_COLUMNS}
                FROM stock_movements m
                JOIN items i ON i.id = m.item_id
                {where}
                ORDER BY m.created_at DESC, m.id DESC
                LIMIT ? OFFSET ?
                """,
                params,
            )
            rows = await cursor.fetchall()
            return [self._row_to_movement(row) for row in rows]

    async def summarize(self) -> list[StockSummary]:
        """Per-item movement totals, items without movements included."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT
                    i.id AS item_id,
                    i.name AS item_name,
                    i.unit AS unit,
                    COALESCE(SUM(CASE WHEN m.movement_type = 'in' THEN m.quantity END), 0)
                        AS total_in,
                    COALESCE(SUM(CASE WHEN m.movement_type = 'out' THEN m.quantity END), 0)
                        AS total_out,
                    COUNT(m.id) AS total_transactions,
                    MAX(m.created_at) AS last_transaction
                FROM items i
                LEFT JOIN stock_movements m ON m.item_id = i.id
                GROUP BY i.id
                ORDER BY i.normalized_name
                """
            )
            rows = await cursor.fetchall()
            return [
                StockSummary(
                    item_id=row["item_id"],
                    item_name=row["item_name"],
                    unit=row["unit"],
                    total_in=row["total_in"],
                    total_out=row["total_out"],
                    total_transactions=row["total_transactions"],
                    last_transaction=_parse_datetime(row["last_transaction"]),
                )
                for row in rows
            ]

    @staticmethod
    async def _insert_item(conn: aiosqlite.Connection, item: Item) -> None:
        try:
            cursor = await conn.execute(
                """
                INSERT INTO items (
                    name, normalized_name, description, category, quantity,
                    min_quantity, unit, version, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.name,
                    item.normalized_name,
                    item.description,
                    item.category,
                    item.quantity,
                    item.min_quantity,
                    item.unit,
                    item.version,
                    item.created_at.isoformat(),
                    item.updated_at.isoformat(),
                ),
            )
        except aiosqlite.IntegrityError as e:
            if "normalized_name" in str(e):
                raise DuplicateItemError(item.name) from e
            raise
        item.id = cursor.lastrowid

    @staticmethod
    async def _insert_movement(conn: aiosqlite.Connection, movement: StockMovement) -> None:
        cursor = await conn.execute(
            """
            INSERT INTO stock_movements (
                item_id, movement_type, quantity, unit, notes, created_by, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                movement.item_id,
                movement.movement_type.value,
                movement.quantity,
                movement.unit,
                movement.notes,
                movement.created_by,
                movement.created_at.isoformat(),
            ),
        )
        movement.id = cursor.lastrowid

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> Item:
        """Convert a database row to an Item entity."""
        return Item(
            id=row["id"],
            name=row["name"],
            description=row["description"] or "",
            category=row["category"] or "",
            quantity=row["quantity"],
            min_quantity=row["min_quantity"],
            unit=row["unit"],
            version=row["version"],
            created_at=_parse_datetime(row["created_at"]) or utc_now(),
            updated_at=_parse_datetime(row["updated_at"]) or utc_now(),
        )

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> StockMovement:
        """Convert a joined database row to a StockMovement entity."""
        return StockMovement(
            id=row["id"],
            item_id=row["item_id"],
            movement_type=MovementType(row["movement_type"]),
            quantity=row["quantity"],
            unit=row["unit"],
            notes=row["notes"],
            created_by=row["created_by"],
            created_at=_parse_datetime(row["created_at"]) or utc_now(),
            item_name=row["item_name"],
        )


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None
