"""Tests for BulkReconciliationEngine."""

from unittest.mock import AsyncMock

import pytest

from src.core.entities import BulkUpdateRow, MovementType
from src.core.exceptions import DatabaseError, EmptyInputError, ValidationError
from src.core.services import BulkReconciliationEngine, StockOperationService


class TestApplyBulkFinalQuantities:
    async def test_mixed_batch(self, store, engine):
        """Resolvable rows are applied, unknown names become errors."""
        item_a = store.add("Item A", quantity=10)
        store.add("Item B", quantity=5)

        result = await engine.apply_bulk_final_quantities(
            [
                BulkUpdateRow(id=item_a.id, quantity=20),
                BulkUpdateRow(name="Ghost Item", quantity=3),
            ]
        )

        assert len(result.results) == 1
        assert result.results[0].id == item_a.id
        assert result.results[0].old_quantity == 10
        assert result.results[0].new_quantity == 20
        assert len(result.errors) == 1
        assert result.errors[0].error_code == "ITEM_NOT_FOUND"
        assert result.errors[0].item.name == "Ghost Item"
        assert store.items[item_a.id].quantity == 20

    async def test_every_row_is_accounted_for_in_order(self, store, engine):
        first = store.add("First", quantity=1)
        second = store.add("Second", quantity=2)
        rows = [
            BulkUpdateRow(id=first.id, quantity=5),
            BulkUpdateRow(name="Nope", quantity=1),
            BulkUpdateRow(name="second", quantity=0),
            BulkUpdateRow(id=first.id, quantity="abc"),
        ]

        result = await engine.apply_bulk_final_quantities(rows)

        assert result.processed_count == len(rows)
        assert [r.id for r in result.results] == [first.id, second.id]
        assert [e.error_code for e in result.errors] == ["ITEM_NOT_FOUND", "INVALID_QUANTITY"]

    async def test_movement_matches_delta(self, store, engine):
        down = store.add("Down", quantity=10)
        up = store.add("Up", quantity=1)

        await engine.apply_bulk_final_quantities(
            [BulkUpdateRow(id=down.id, quantity=4), BulkUpdateRow(id=up.id, quantity=6)]
        )

        out_move = store.movements_for(down.id)[0]
        in_move = store.movements_for(up.id)[0]
        assert (out_move.movement_type, out_move.quantity) == (MovementType.OUT, 6)
        assert (in_move.movement_type, in_move.quantity) == (MovementType.IN, 5)
        assert out_move.notes == "Stock reconciliation"

    async def test_unchanged_row_succeeds_without_movement(self, store, engine):
        item = store.add("Steady", quantity=7)

        result = await engine.apply_bulk_final_quantities([BulkUpdateRow(id=item.id, quantity=7)])

        assert result.results[0].old_quantity == result.results[0].new_quantity == 7
        assert store.movements == []

    async def test_reapplying_is_idempotent(self, store, engine):
        item = store.add("Widget", quantity=3)
        rows = [BulkUpdateRow(id=item.id, quantity=9)]

        await engine.apply_bulk_final_quantities(rows)
        await engine.apply_bulk_final_quantities(rows)

        assert store.items[item.id].quantity == 9
        assert len(store.movements_for(item.id)) == 1

    async def test_name_lookup_is_case_insensitive(self, store, engine):
        item = store.add("Printer Paper", quantity=2)

        result = await engine.apply_bulk_final_quantities(
            [BulkUpdateRow(name="  printer PAPER ", quantity=8)]
        )

        assert result.results[0].id == item.id
        assert result.results[0].name == "Printer Paper"

    async def test_string_id_is_accepted(self, store, engine):
        item = store.add("Widget", quantity=3)
        result = await engine.apply_bulk_final_quantities(
            [BulkUpdateRow(id=str(item.id), quantity="4")]
        )
        assert result.results[0].new_quantity == 4

    async def test_unknown_id_does_not_fall_back_to_name(self, store, engine):
        store.add("Widget", quantity=3)

        result = await engine.apply_bulk_final_quantities(
            [BulkUpdateRow(id=404, name="Widget", quantity=1)]
        )

        assert result.results == []
        assert result.errors[0].error_code == "ITEM_NOT_FOUND"
        assert "404" in result.errors[0].error

    async def test_row_without_reference(self, engine):
        result = await engine.apply_bulk_final_quantities([BulkUpdateRow(quantity=1)])
        assert result.errors[0].error_code == "ITEM_NOT_FOUND"

    @pytest.mark.parametrize("quantity", [-1, "abc", 2.5, None])
    async def test_invalid_final_quantity(self, store, engine, quantity):
        item = store.add("Widget", quantity=3)

        result = await engine.apply_bulk_final_quantities(
            [BulkUpdateRow(id=item.id, quantity=quantity)]
        )

        assert result.errors[0].error_code == "INVALID_QUANTITY"
        assert store.items[item.id].quantity == 3

    async def test_unstorable_values_fail_only_their_row(self, store, engine):
        item_a = store.add("Item A", quantity=10)
        item_b = store.add("Item B", quantity=5)
        rows = [
            BulkUpdateRow(id=item_a.id, quantity=1e30),
            BulkUpdateRow(id=10**30, quantity=1),
            BulkUpdateRow(id="9" * 25, quantity=1),
            BulkUpdateRow(id=item_b.id, quantity=7),
        ]

        result = await engine.apply_bulk_final_quantities(rows)

        assert result.processed_count == len(rows)
        assert [e.error_code for e in result.errors] == [
            "INVALID_QUANTITY",
            "ITEM_NOT_FOUND",
            "ITEM_NOT_FOUND",
        ]
        assert [r.id for r in result.results] == [item_b.id]
        assert store.items[item_a.id].quantity == 10
        assert store.items[item_b.id].quantity == 7

    async def test_custom_notes_and_actor(self, store, engine):
        item = store.add("Widget", quantity=3)

        await engine.apply_bulk_final_quantities(
            [BulkUpdateRow(id=item.id, quantity=1)], notes="Year-end count", created_by=4
        )

        movement = store.movements_for(item.id)[0]
        assert movement.notes == "Year-end count"
        assert movement.created_by == 4

    async def test_empty_batch_rejected(self, engine):
        with pytest.raises(EmptyInputError):
            await engine.apply_bulk_final_quantities([])

    async def test_oversized_batch_rejected(self, store, stock_service):
        small_engine = BulkReconciliationEngine(store, stock_service, max_rows=2)
        rows = [BulkUpdateRow(name=f"Item {i}", quantity=1) for i in range(3)]

        with pytest.raises(ValidationError):
            await small_engine.apply_bulk_final_quantities(rows)

    async def test_storage_failure_aborts_batch(self, make_item):
        store = AsyncMock()
        store.get_item.return_value = make_item(quantity=1)
        store.apply_movement.side_effect = DatabaseError("apply_movement", "disk I/O error")
        service = StockOperationService(store, retry_delay=0)
        failing_engine = BulkReconciliationEngine(store, service)

        with pytest.raises(DatabaseError):
            await failing_engine.apply_bulk_final_quantities([BulkUpdateRow(id=1, quantity=5)])


class TestApplyBulkDeltas:
    async def test_signed_deltas(self, store, engine):
        item_a = store.add("Item A", quantity=10)
        item_b = store.add("Item B", quantity=10)

        result = await engine.apply_bulk_deltas(
            [BulkUpdateRow(id=item_a.id, quantity=5), BulkUpdateRow(name="item b", quantity="-4")]
        )

        assert [r.new_quantity for r in result.results] == [15, 6]
        assert store.movements_for(item_a.id)[0].movement_type == MovementType.IN
        assert store.movements_for(item_b.id)[0].movement_type == MovementType.OUT
        assert store.movements_for(item_b.id)[0].notes == "Bulk stock adjustment"

    async def test_zero_delta_is_invalid(self, store, engine):
        item = store.add("Widget", quantity=10)
        result = await engine.apply_bulk_deltas([BulkUpdateRow(id=item.id, quantity=0)])
        assert result.errors[0].error_code == "INVALID_QUANTITY"

    async def test_overdraw_is_row_error(self, store, engine):
        item = store.add("Item B", quantity=5)
        other = store.add("Item C", quantity=1)

        result = await engine.apply_bulk_deltas(
            [BulkUpdateRow(id=item.id, quantity=-10), BulkUpdateRow(id=other.id, quantity=1)]
        )

        assert result.errors[0].error_code == "INSUFFICIENT_STOCK"
        assert store.items[item.id].quantity == 5
        assert result.results[0].id == other.id

    async def test_empty_batch_rejected(self, engine):
        with pytest.raises(EmptyInputError):
            await engine.apply_bulk_deltas([])
