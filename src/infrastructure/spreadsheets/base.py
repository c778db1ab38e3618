"""Shared helpers for spreadsheet readers."""

from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import Any

from src.core.interfaces.spreadsheet import SheetRow


def clean_cell(value: Any) -> Any:
    """Normalize a cell value: blank -> None, integral float -> int, strings stripped."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _header_label(value: Any) -> str:
    if value is None:
        return ""
    return str(value).replace("\ufeff", "").strip()


def rows_from_matrix(matrix: Iterable[Sequence[Any]]) -> list[SheetRow]:
    """
    Build header-keyed rows from a grid of cell values.

    The first row with any non-blank cell is the header. Columns with a blank
    header are ignored, as are data rows with no values. Row numbers count every
    row of the grid starting at 1.
    """
    headers: list[str] | None = None
    rows: list[SheetRow] = []

    for row_number, raw in enumerate(matrix, start=1):
        cells = [clean_cell(v) for v in raw]
        if not any(c is not None for c in cells):
            continue

        if headers is None:
            headers = [_header_label(v) for v in raw]
            continue

        values = {
            header: cells[idx] if idx < len(cells) else None
            for idx, header in enumerate(headers)
            if header
        }
        if any(v is not None for v in values.values()):
            rows.append(SheetRow(row_number=row_number, values=values))

    return rows
