"""Legacy Excel (.xls) reader backed by xlrd."""

import xlrd
from xlrd.compdoc import CompDocError

from src.config import get_logger
from src.core.exceptions import ParsingFailedError
from src.core.interfaces.spreadsheet import ISpreadsheetReader, SheetRow
from src.infrastructure.spreadsheets.base import rows_from_matrix

logger = get_logger(__name__)

_BLANK_TYPES = (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK)


class XlsReader(ISpreadsheetReader):
    """Reads the first sheet of a BIFF (.xls) workbook."""

    @property
    def extensions(self) -> tuple[str, ...]:
        return (".xls",)

    def read_rows(self, content: bytes, filename: str) -> list[SheetRow]:
        try:
            workbook = xlrd.open_workbook(file_contents=content)
        except (xlrd.XLRDError, CompDocError, ValueError, IndexError) as e:
            raise ParsingFailedError(filename, "not a valid .xls workbook") from e

        if workbook.nsheets == 0:
            raise ParsingFailedError(filename, "workbook has no worksheets")
        sheet = workbook.sheet_by_index(0)

        matrix = [
            [
                None if cell.ctype in _BLANK_TYPES else cell.value
                for cell in sheet.row(row_index)
            ]
            for row_index in range(sheet.nrows)
        ]
        rows = rows_from_matrix(matrix)

        logger.debug("xls_rows_read", filename=filename, sheet=sheet.name, rows=len(rows))
        return rows
