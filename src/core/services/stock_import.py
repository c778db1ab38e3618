"""
Spreadsheet row normalization for stock imports.

Maps header-keyed sheet rows onto bulk reconciliation rows. Header names are
matched case-insensitively; the final quantity may come from any of several
column names. Rows that cannot be used are not dropped silently, they are
returned as ``skipped`` with the reason.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from src.core.entities.bulk import BulkUpdateRow, SkippedRow
from src.core.interfaces.spreadsheet import SheetRow

ID_COLUMN = "id"
NAME_COLUMN = "name"

# Checked in order; the first non-blank one wins.
FINAL_QUANTITY_COLUMNS = ("finalquantity", "final_quantity", "quantity", "final")


def normalize_header(value: Any) -> str:
    if value is None:
        return ""
    return str(value).replace("\ufeff", "").strip().lower()


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    try:
        return Decimal(str(value).strip()).is_finite()
    except InvalidOperation:
        return False


def _clean_id(value: Any) -> str:
    # Spreadsheet engines hand back whole numbers as floats
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


@dataclass
class NormalizedBatch:
    """Rows ready for reconciliation plus the rows that were left out."""

    rows: list[BulkUpdateRow] = field(default_factory=list)
    skipped: list[SkippedRow] = field(default_factory=list)


def normalize_final_quantity_rows(sheet_rows: Iterable[SheetRow]) -> NormalizedBatch:
    """Turn sheet rows into ``{id|name, quantity}`` reconciliation rows."""
    batch = NormalizedBatch()

    for sheet_row in sheet_rows:
        values = {normalize_header(k): v for k, v in sheet_row.values.items()}

        final_quantity = next(
            (values[col] for col in FINAL_QUANTITY_COLUMNS if not _is_blank(values.get(col))),
            None,
        )
        if final_quantity is None:
            batch.skipped.append(
                SkippedRow(
                    row_number=sheet_row.row_number,
                    reason="missing final quantity",
                    values=sheet_row.values,
                )
            )
            continue

        if not _is_number(final_quantity):
            batch.skipped.append(
                SkippedRow(
                    row_number=sheet_row.row_number,
                    reason=f"final quantity is not a number: {final_quantity!r}",
                    values=sheet_row.values,
                )
            )
            continue

        quantity = final_quantity.strip() if isinstance(final_quantity, str) else final_quantity

        if not _is_blank(values.get(ID_COLUMN)):
            batch.rows.append(BulkUpdateRow(id=_clean_id(values[ID_COLUMN]), quantity=quantity))
        elif not _is_blank(values.get(NAME_COLUMN)):
            batch.rows.append(
                BulkUpdateRow(name=str(values[NAME_COLUMN]).strip(), quantity=quantity)
            )
        else:
            batch.skipped.append(
                SkippedRow(
                    row_number=sheet_row.row_number,
                    reason="missing id or name",
                    values=sheet_row.values,
                )
            )

    return batch
