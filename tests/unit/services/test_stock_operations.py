"""Tests for StockOperationService."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.entities import MAX_STORED_INT, Item, MovementType
from src.core.exceptions import (
    ConcurrentUpdateError,
    InsufficientStockError,
    InvalidQuantityError,
    ItemNotFoundError,
)
from src.core.services import StockOperation, StockOperationService, coerce_quantity


class TestCoerceQuantity:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(5, 5), ("7", 7), (" 12 ", 12), (3.0, 3), ("4.0", 4)],
    )
    def test_accepts_whole_numbers(self, value, expected):
        assert coerce_quantity(value) == expected

    @pytest.mark.parametrize("value", [None, True, False, "abc", "", 2.5, "1.5", "nan", "inf"])
    def test_rejects_non_integral(self, value):
        with pytest.raises(InvalidQuantityError):
            coerce_quantity(value)

    def test_zero_rejected_by_default(self):
        with pytest.raises(InvalidQuantityError):
            coerce_quantity(0)
        assert coerce_quantity(0, allow_zero=True) == 0

    def test_negative_rejected_by_default(self):
        with pytest.raises(InvalidQuantityError):
            coerce_quantity(-3, allow_zero=True)
        assert coerce_quantity("-3", allow_negative=True) == -3

    @pytest.mark.parametrize(
        "value", [2**63, -(2**63) - 1, 10**19, "1e30", 1e30, "99999999999999999999"]
    )
    def test_rejects_values_too_large_to_store(self, value):
        with pytest.raises(InvalidQuantityError, match="too large"):
            coerce_quantity(value, allow_negative=True)

    def test_largest_storable_value_accepted(self):
        assert coerce_quantity(MAX_STORED_INT) == MAX_STORED_INT
        assert coerce_quantity(str(MAX_STORED_INT)) == MAX_STORED_INT


class TestRecordStockIn:
    async def test_increases_quantity_and_logs_one_movement(self, store, stock_service):
        item = store.add("Widget", quantity=10)

        record = await stock_service.record_stock_in(
            StockOperation(item_id=item.id, quantity=5, notes="delivery", created_by=9)
        )

        assert record.previous_quantity == 10
        assert record.new_quantity == 15
        assert store.items[item.id].quantity == 15
        movements = store.movements_for(item.id)
        assert len(movements) == 1
        assert movements[0].movement_type == MovementType.IN
        assert movements[0].quantity == 5
        assert movements[0].notes == "delivery"
        assert movements[0].created_by == 9

    async def test_unit_defaults_to_item_unit(self, store, stock_service):
        item = store.add("Paper", quantity=0, unit="ream")
        record = await stock_service.record_stock_in(StockOperation(item_id=item.id, quantity=2))
        assert record.movement.unit == "ream"

    async def test_explicit_unit(self, store, stock_service):
        item = store.add("Paper", quantity=0, unit="ream")
        record = await stock_service.record_stock_in(
            StockOperation(item_id=item.id, quantity=2, unit="box")
        )
        assert record.movement.unit == "box"

    async def test_unknown_item(self, stock_service):
        with pytest.raises(ItemNotFoundError):
            await stock_service.record_stock_in(StockOperation(item_id=999, quantity=1))

    @pytest.mark.parametrize("quantity", [0, -4, "abc", 1.5, True])
    async def test_invalid_quantity_writes_nothing(self, store, stock_service, quantity):
        item = store.add("Widget", quantity=10)
        with pytest.raises(InvalidQuantityError):
            await stock_service.record_stock_in(StockOperation(item_id=item.id, quantity=quantity))
        assert store.items[item.id].quantity == 10
        assert store.movements == []

    async def test_overflowing_total_rejected(self, store, stock_service):
        item = store.add("Widget", quantity=MAX_STORED_INT)

        with pytest.raises(InvalidQuantityError, match="largest storable"):
            await stock_service.record_stock_in(StockOperation(item_id=item.id, quantity=1))

        assert store.items[item.id].quantity == MAX_STORED_INT
        assert store.movements == []


class TestRecordStockOut:
    async def test_decreases_quantity(self, store, stock_service):
        item = store.add("Widget", quantity=10)

        record = await stock_service.record_stock_out(StockOperation(item_id=item.id, quantity=4))

        assert record.new_quantity == 6
        assert record.movement.movement_type == MovementType.OUT
        assert record.movement.quantity == 4

    async def test_can_empty_the_item(self, store, stock_service):
        item = store.add("Widget", quantity=3)
        record = await stock_service.record_stock_out(StockOperation(item_id=item.id, quantity=3))
        assert record.new_quantity == 0

    async def test_insufficient_stock_leaves_quantity_unchanged(self, store, stock_service):
        item = store.add("Item B", quantity=5)

        with pytest.raises(InsufficientStockError) as exc_info:
            await stock_service.record_stock_out(StockOperation(item_id=item.id, quantity=10))

        assert exc_info.value.available == 5
        assert exc_info.value.requested == 10
        assert store.items[item.id].quantity == 5
        assert store.movements == []


class TestSetQuantity:
    async def test_positive_delta_is_stock_in(self, store, stock_service):
        item = store.add("Widget", quantity=10)
        record = await stock_service.set_quantity(item.id, 20)
        assert record.previous_quantity == 10
        assert record.new_quantity == 20
        assert record.movement.movement_type == MovementType.IN
        assert record.movement.quantity == 10

    async def test_negative_delta_is_stock_out(self, store, stock_service):
        item = store.add("Widget", quantity=10)
        record = await stock_service.set_quantity(item.id, "3")
        assert record.new_quantity == 3
        assert record.movement.movement_type == MovementType.OUT
        assert record.movement.quantity == 7

    async def test_zero_delta_writes_nothing(self, store, stock_service):
        item = store.add("Widget", quantity=10)
        record = await stock_service.set_quantity(item.id, 10)
        assert record.changed is False
        assert record.previous_quantity == record.new_quantity == 10
        assert store.movements == []
        assert store.items[item.id].version == 0

    async def test_negative_target_rejected(self, store, stock_service):
        item = store.add("Widget", quantity=10)
        with pytest.raises(InvalidQuantityError):
            await stock_service.set_quantity(item.id, -1)


class TestConcurrencyRetry:
    async def test_conflict_is_retried_with_fresh_read(self, make_item):
        first = make_item(quantity=10, version=0)
        second = make_item(quantity=12, version=1)
        updated = make_item(quantity=20, version=2)

        store = AsyncMock()
        store.get_item.side_effect = [first, second]
        store.apply_movement.side_effect = [
            ConcurrentUpdateError(1, 0),
            (updated, MagicMock()),
        ]
        service = StockOperationService(store, max_attempts=3, retry_delay=0)

        record = await service.set_quantity(1, 20)

        assert record.new_quantity == 20
        assert store.apply_movement.await_count == 2
        retry_call = store.apply_movement.await_args_list[1]
        assert retry_call.kwargs["expected_version"] == 1
        assert retry_call.kwargs["new_quantity"] == 20
        assert retry_call.args[0].quantity == 8

    async def test_exhausted_retries_surface_conflict(self, make_item):
        store = AsyncMock()
        store.get_item.return_value = make_item(quantity=10)
        store.apply_movement.side_effect = ConcurrentUpdateError(1, 0)
        service = StockOperationService(store, max_attempts=2, retry_delay=0)

        with pytest.raises(ConcurrentUpdateError):
            await service.record_stock_in(StockOperation(item_id=1, quantity=1))

        assert store.apply_movement.await_count == 2

    async def test_stock_out_rechecks_balance_after_conflict(self, make_item):
        store = AsyncMock()
        store.get_item.side_effect = [make_item(quantity=10), make_item(quantity=2, version=1)]
        store.apply_movement.side_effect = ConcurrentUpdateError(1, 0)
        service = StockOperationService(store, max_attempts=3, retry_delay=0)

        with pytest.raises(InsufficientStockError):
            await service.record_stock_out(StockOperation(item_id=1, quantity=5))

        assert store.apply_movement.await_count == 1

    async def test_not_found_is_not_retried(self):
        store = AsyncMock()
        store.get_item.return_value = None
        service = StockOperationService(store, max_attempts=5, retry_delay=0)

        with pytest.raises(ItemNotFoundError):
            await service.record_stock_in(StockOperation(item_id=1, quantity=1))

        assert store.get_item.await_count == 1


class TestInjectedLogger:
    async def test_uses_injected_logger(self, store):
        logger = MagicMock()
        service = StockOperationService(store, logger=logger)
        item = store.add("Widget", quantity=1)

        await service.record_stock_in(StockOperation(item_id=item.id, quantity=1))

        event = logger.info.call_args[0][0]
        assert event == "stock_in_recorded"
        assert logger.info.call_args.kwargs["item_id"] == item.id


def test_item_fixture_is_pydantic(make_item):
    assert isinstance(make_item(), Item)
