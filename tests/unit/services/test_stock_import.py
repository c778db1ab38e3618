"""Tests for spreadsheet row normalization."""

import pytest

from src.core.interfaces.spreadsheet import SheetRow
from src.core.services import normalize_final_quantity_rows
from src.core.services.stock_import import normalize_header


def sheet(*rows: dict) -> list[SheetRow]:
    return [SheetRow(row_number=i + 2, values=values) for i, values in enumerate(rows)]


class TestNormalizeHeader:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("Final Quantity", "final quantity"), ("\ufeffID", "id"), ("  NAME ", "name"), (None, "")],
    )
    def test_normalize(self, raw, expected):
        assert normalize_header(raw) == expected


class TestFinalQuantityColumns:
    @pytest.mark.parametrize("column", ["finalQuantity", "final_quantity", "Quantity", "FINAL"])
    def test_accepted_aliases(self, column):
        batch = normalize_final_quantity_rows(sheet({"id": 3, column: 12}))
        assert batch.rows[0].quantity == 12

    def test_first_non_blank_alias_wins(self):
        batch = normalize_final_quantity_rows(
            sheet({"id": 1, "finalQuantity": " ", "final_quantity": 7, "quantity": 99})
        )
        assert batch.rows[0].quantity == 7

    def test_numeric_string_is_trimmed(self):
        batch = normalize_final_quantity_rows(sheet({"name": "Widget", "quantity": " 15 "}))
        assert batch.rows[0].quantity == "15"


class TestRowReference:
    def test_id_preferred_over_name(self):
        batch = normalize_final_quantity_rows(sheet({"id": 4, "name": "Widget", "quantity": 1}))
        assert batch.rows[0].id == "4"
        assert batch.rows[0].name is None

    def test_integral_float_id(self):
        batch = normalize_final_quantity_rows(sheet({"ID": 17.0, "quantity": 1}))
        assert batch.rows[0].id == "17"

    def test_name_used_when_id_blank(self):
        batch = normalize_final_quantity_rows(sheet({"id": "", "Name": " Stapler ", "quantity": 2}))
        assert batch.rows[0].id is None
        assert batch.rows[0].name == "Stapler"


class TestSkippedRows:
    def test_missing_quantity(self):
        batch = normalize_final_quantity_rows(sheet({"id": 1, "quantity": None}))
        assert batch.rows == []
        assert batch.skipped[0].reason == "missing final quantity"
        assert batch.skipped[0].row_number == 2

    def test_non_numeric_quantity(self):
        batch = normalize_final_quantity_rows(sheet({"id": 1, "quantity": "lots"}))
        assert "not a number" in batch.skipped[0].reason
        assert batch.skipped[0].values == {"id": 1, "quantity": "lots"}

    def test_missing_reference(self):
        batch = normalize_final_quantity_rows(sheet({"notes": "x", "quantity": 4}))
        assert batch.skipped[0].reason == "missing id or name"

    def test_good_and_bad_rows_are_split(self):
        batch = normalize_final_quantity_rows(
            sheet(
                {"id": 1, "quantity": 5},
                {"id": 2, "quantity": ""},
                {"name": "Widget", "final": 0},
            )
        )
        assert len(batch.rows) == 2
        assert [s.row_number for s in batch.skipped] == [3]
