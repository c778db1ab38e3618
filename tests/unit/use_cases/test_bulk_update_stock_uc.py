"""Tests for the bulk stock use cases."""

from unittest.mock import AsyncMock

import pytest

from src.application.dto.requests import BulkAdjustStockRow, BulkUpdateStockRow
from src.application.use_cases.bulk_update_stock import (
    BulkAdjustStockUseCase,
    BulkUpdateStockUseCase,
)
from src.core.entities import BulkUpdateResult, BulkUpdateRow, ReconciledRow, RowError
from src.core.exceptions import EmptyInputError


@pytest.fixture
def mock_engine():
    return AsyncMock()


def _result() -> BulkUpdateResult:
    return BulkUpdateResult(
        results=[ReconciledRow(id=1, name="Item A", old_quantity=10, new_quantity=20)],
        errors=[
            RowError(
                item=BulkUpdateRow(name="Ghost Item", quantity=3),
                error="Item not found: name 'Ghost Item'",
                error_code="ITEM_NOT_FOUND",
            )
        ],
    )


class TestBulkUpdateStockUseCase:
    async def test_rows_forwarded_in_order(self, mock_engine):
        mock_engine.apply_bulk_final_quantities.return_value = _result()
        use_case = BulkUpdateStockUseCase(engine=mock_engine)

        await use_case.execute(
            [
                BulkUpdateStockRow(id=1, quantity=20),
                BulkUpdateStockRow(name="Ghost Item", quantity=3),
            ],
            user_id=5,
        )

        rows = mock_engine.apply_bulk_final_quantities.call_args[0][0]
        assert [r.reference() for r in rows] == [
            {"id": 1, "quantity": 20},
            {"name": "Ghost Item", "quantity": 3},
        ]
        assert mock_engine.apply_bulk_final_quantities.call_args.kwargs["created_by"] == 5

    async def test_empty_input_propagates(self, mock_engine):
        mock_engine.apply_bulk_final_quantities.side_effect = EmptyInputError()
        use_case = BulkUpdateStockUseCase(engine=mock_engine)

        with pytest.raises(EmptyInputError):
            await use_case.execute([])

    async def test_to_response_tags_rows(self, mock_engine):
        mock_engine.apply_bulk_final_quantities.return_value = _result()
        use_case = BulkUpdateStockUseCase(engine=mock_engine)

        result = await use_case.execute([BulkUpdateStockRow(id=1, quantity=20)])
        payload = use_case.to_response(result).model_dump(mode="json", by_alias=True)

        assert payload["success"] is True
        assert payload["updatedCount"] == 1
        assert payload["errorCount"] == 1
        assert payload["results"][0] == {
            "status": "updated",
            "id": 1,
            "name": "Item A",
            "oldQuantity": 10,
            "newQuantity": 20,
        }
        assert payload["errors"][0]["status"] == "error"
        assert payload["errors"][0]["item"] == {"name": "Ghost Item", "quantity": 3}
        assert payload["errors"][0]["errorCode"] == "ITEM_NOT_FOUND"
        assert payload["skipped"] == []


class TestBulkAdjustStockUseCase:
    async def test_delta_mapped_to_row_quantity(self, mock_engine):
        mock_engine.apply_bulk_deltas.return_value = BulkUpdateResult()
        use_case = BulkAdjustStockUseCase(engine=mock_engine)

        await use_case.execute([BulkAdjustStockRow(name="Item A", delta=-3)])

        rows = mock_engine.apply_bulk_deltas.call_args[0][0]
        assert rows[0].quantity == -3
        assert rows[0].name == "Item A"

    async def test_failed_rows_echo_delta(self, mock_engine):
        mock_engine.apply_bulk_deltas.return_value = BulkUpdateResult(
            errors=[
                RowError(
                    item=BulkUpdateRow(id=2, quantity=-10),
                    error="Insufficient stock",
                    error_code="INSUFFICIENT_STOCK",
                )
            ]
        )
        use_case = BulkAdjustStockUseCase(engine=mock_engine)

        result = await use_case.execute([BulkAdjustStockRow(id=2, delta=-10)])
        response = use_case.to_response(result)

        assert response.errors[0].item == {"id": 2, "delta": -10}
        assert response.updated_count == 0
