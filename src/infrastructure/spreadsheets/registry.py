"""
Spreadsheet reader registry.

Routes an uploaded file to the reader for its extension.
"""

from pathlib import Path

from src.config import get_logger
from src.core.exceptions import UnsupportedFileTypeError
from src.core.interfaces.spreadsheet import ISpreadsheetReader
from src.infrastructure.spreadsheets.csv_reader import CsvReader
from src.infrastructure.spreadsheets.xls_reader import XlsReader
from src.infrastructure.spreadsheets.xlsx_reader import XlsxReader

logger = get_logger(__name__)


class SpreadsheetReaderRegistry:
    """Registry of spreadsheet readers keyed by file extension."""

    def __init__(self, readers: list[ISpreadsheetReader] | None = None):
        self._readers: list[ISpreadsheetReader] = []
        for reader in readers or []:
            self.register(reader)

    def register(self, reader: ISpreadsheetReader) -> None:
        """Register a reader; the first reader registered for an extension wins."""
        self._readers.append(reader)
        logger.debug(
            "spreadsheet_reader_registered",
            reader=type(reader).__name__,
            extensions=list(reader.extensions),
        )

    @property
    def extensions(self) -> list[str]:
        return [ext for reader in self._readers for ext in reader.extensions]

    def get_reader(self, filename: str) -> ISpreadsheetReader:
        """
        Find the reader for ``filename``.

        Raises:
            UnsupportedFileTypeError: If no registered reader handles the extension.
        """
        for reader in self._readers:
            if reader.supports(filename):
                return reader
        raise UnsupportedFileTypeError(
            filename=filename,
            extension=Path(filename).suffix.lower() or "(none)",
            allowed=self.extensions,
        )


# Singleton
_registry: SpreadsheetReaderRegistry | None = None


def get_spreadsheet_registry() -> SpreadsheetReaderRegistry:
    """Get the registry with the built-in readers."""
    global _registry
    if _registry is None:
        _registry = SpreadsheetReaderRegistry([XlsxReader(), XlsReader(), CsvReader()])
    return _registry


def reset_spreadsheet_registry() -> None:
    """Reset singleton (for testing)."""
    global _registry
    _registry = None
