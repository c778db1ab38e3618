"""Spreadsheet reader implementations."""

from src.infrastructure.spreadsheets.base import clean_cell, rows_from_matrix
from src.infrastructure.spreadsheets.csv_reader import CsvReader
from src.infrastructure.spreadsheets.registry import (
    SpreadsheetReaderRegistry,
    get_spreadsheet_registry,
    reset_spreadsheet_registry,
)
from src.infrastructure.spreadsheets.xls_reader import XlsReader
from src.infrastructure.spreadsheets.xlsx_reader import XlsxReader

__all__ = [
    # Readers
    "CsvReader",
    "XlsxReader",
    "XlsReader",
    # Registry
    "SpreadsheetReaderRegistry",
    "get_spreadsheet_registry",
    "reset_spreadsheet_registry",
    # Helpers
    "clean_cell",
    "rows_from_matrix",
]
