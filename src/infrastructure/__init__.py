"""Infrastructure layer implementations."""

from src.infrastructure import spreadsheets, storage

__all__ = ["storage", "spreadsheets"]
