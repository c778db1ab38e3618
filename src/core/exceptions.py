"""
Stockroom error taxonomy.

Each error carries a stable machine code (``ITEM_NOT_FOUND``, ``INSUFFICIENT_STOCK``...)
and a details dict; the API renders both unchanged. ``InventoryError`` subclasses
are the failures a bulk call records per row instead of aborting.
"""

from typing import Any


class StockroomError(Exception):
    """Base exception for all Stockroom errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}


# Storage Exceptions
class StorageError(StockroomError):
    """Base exception for storage operations."""

    pass


class DuplicateItemError(StorageError):
    """An item with the same name already exists."""

    def __init__(self, name: str):
        super().__init__(
            f"Item already exists: {name}",
            code="DUPLICATE_ITEM",
            details={"name": name},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Inventory Exceptions
#
# Everything below InventoryError is a per-row failure inside a bulk call.
class InventoryError(StockroomError):
    """Base exception for stock operations on a single item."""

    pass


class ItemNotFoundError(InventoryError):
    """Item could not be resolved by id or name."""

    def __init__(self, item_id: int | str | None = None, name: str | None = None):
        if item_id is not None:
            ref = f"id {item_id}"
        elif name is not None:
            ref = f"name '{name}'"
        else:
            ref = "empty reference"
        super().__init__(
            f"Item not found: {ref}",
            code="ITEM_NOT_FOUND",
            details={"item_id": item_id, "name": name},
        )


class InvalidQuantityError(InventoryError):
    """Quantity is non-numeric, non-integral or out of range."""

    def __init__(self, value: Any, reason: str = "must be a positive integer"):
        super().__init__(
            f"Invalid quantity {value!r}: {reason}",
            code="INVALID_QUANTITY",
            details={"value": str(value)[:100] if value is not None else None, "reason": reason},
        )


class InsufficientStockError(InventoryError):
    """Stock-out exceeds the quantity on hand."""

    def __init__(self, item_id: int, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for item {item_id}. Available: {available}, Requested: {requested}",
            code="INSUFFICIENT_STOCK",
            details={"item_id": item_id, "requested": requested, "available": available},
        )
        self.requested = requested
        self.available = available


class ConcurrentUpdateError(InventoryError):
    """Item changed between read and conditional write."""

    def __init__(self, item_id: int, expected_version: int):
        super().__init__(
            f"Item {item_id} was modified concurrently (expected version {expected_version})",
            code="CONCURRENT_UPDATE",
            details={"item_id": item_id, "expected_version": expected_version},
        )


# Import Exceptions
class ParserError(StockroomError):
    """Base exception for spreadsheet import."""

    pass


class ParsingFailedError(ParserError):
    """Uploaded spreadsheet could not be read."""

    def __init__(self, filename: str, reason: str):
        super().__init__(
            f"Failed to parse '{filename}': {reason}",
            code="PARSING_FAILED",
            details={"filename": filename, "reason": reason},
        )


class EmptyInputError(StockroomError):
    """No usable rows were supplied."""

    def __init__(self, source: str = "request", skipped: int = 0):
        super().__init__(
            f"No valid rows found in {source}",
            code="EMPTY_INPUT",
            details={"source": source, "skipped": skipped},
        )


# Validation Exceptions
class ValidationError(StockroomError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class FileTooLargeError(ValidationError):
    """Uploaded file exceeds size limit."""

    def __init__(self, filename: str, size: int, max_size: int):
        super().__init__(
            field="file",
            message=f"File '{filename}' is too large ({size} bytes, max {max_size})",
        )
        self.details.update(
            {
                "filename": filename,
                "size": size,
                "max_size": max_size,
            }
        )


class UnsupportedFileTypeError(ValidationError):
    """File type is not supported."""

    def __init__(self, filename: str, extension: str, allowed: list[str]):
        super().__init__(
            field="file",
            message=f"Unsupported file type '{extension}'. Allowed: {', '.join(allowed)}",
        )
        self.details.update(
            {
                "filename": filename,
                "extension": extension,
                "allowed": allowed,
            }
        )


class ConfigurationError(StockroomError):
    """Configuration error."""

    pass
