"""Excel 2007+ (.xlsx) reader backed by openpyxl."""

import zipfile
from io import BytesIO

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from src.config import get_logger
from src.core.exceptions import ParsingFailedError
from src.core.interfaces.spreadsheet import ISpreadsheetReader, SheetRow
from src.infrastructure.spreadsheets.base import rows_from_matrix

logger = get_logger(__name__)


class XlsxReader(ISpreadsheetReader):
    """Reads the first worksheet of an .xlsx workbook, formulas as cached values."""

    @property
    def extensions(self) -> tuple[str, ...]:
        return (".xlsx",)

    def read_rows(self, content: bytes, filename: str) -> list[SheetRow]:
        try:
            wb = openpyxl.load_workbook(BytesIO(content), read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
            raise ParsingFailedError(filename, "not a valid .xlsx workbook") from e

        try:
            if not wb.worksheets:
                raise ParsingFailedError(filename, "workbook has no worksheets")
            sheet = wb.worksheets[0]
            rows = rows_from_matrix(sheet.iter_rows(values_only=True))
        finally:
            wb.close()

        logger.debug("xlsx_rows_read", filename=filename, sheet=sheet.title, rows=len(rows))
        return rows
