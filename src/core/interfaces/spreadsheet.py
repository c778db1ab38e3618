"""
Abstract interface for spreadsheet readers.

Readers turn an uploaded file into header-keyed rows; they know nothing about
items or quantities.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class SheetRow:
    """One data row keyed by the header cell text."""

    row_number: int  # 1-based, as shown in the spreadsheet application
    values: dict[str, Any] = field(default_factory=dict)


class ISpreadsheetReader(ABC):
    """
    Abstract interface for spreadsheet readers.

    Implementations: CsvReader, XlsxReader, XlsReader
    """

    @property
    @abstractmethod
    def extensions(self) -> tuple[str, ...]:
        """Lower-case file extensions handled, including the dot."""
        pass

    @abstractmethod
    def read_rows(self, content: bytes, filename: str) -> list[SheetRow]:
        """
        Read the first sheet of ``content``.

        The first non-empty row is the header; fully empty rows are dropped.

        Raises:
            ParsingFailedError: If the file cannot be read.
        """
        pass

    def supports(self, filename: str) -> bool:
        """Check if this reader handles the file's extension."""
        return filename.lower().endswith(self.extensions)
