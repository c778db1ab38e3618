"""CSV spreadsheet reader."""

import csv
from io import StringIO

from src.config import get_logger
from src.core.exceptions import ParsingFailedError
from src.core.interfaces.spreadsheet import ISpreadsheetReader, SheetRow
from src.infrastructure.spreadsheets.base import rows_from_matrix

logger = get_logger(__name__)


class CsvReader(ISpreadsheetReader):
    """Reads UTF-8 CSV files, with or without a byte order mark."""

    @property
    def extensions(self) -> tuple[str, ...]:
        return (".csv",)

    def read_rows(self, content: bytes, filename: str) -> list[SheetRow]:
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParsingFailedError(filename, "file must be UTF-8 encoded") from e

        try:
            rows = rows_from_matrix(csv.reader(StringIO(text, newline="")))
        except csv.Error as e:
            raise ParsingFailedError(filename, str(e)) from e

        logger.debug("csv_rows_read", filename=filename, rows=len(rows))
        return rows
