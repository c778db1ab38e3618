"""Core interfaces (ports) for dependency injection."""

from src.core.interfaces.inventory_store import IInventoryStore
from src.core.interfaces.spreadsheet import ISpreadsheetReader, SheetRow

__all__ = [
    # Storage
    "IInventoryStore",
    # Import
    "ISpreadsheetReader",
    "SheetRow",
]
