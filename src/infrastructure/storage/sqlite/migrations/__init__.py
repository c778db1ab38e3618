"""Database migrations module."""

from src.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationFailedError,
    MigrationInfo,
    MigrationResult,
    create_backup,
    discover_migrations,
    initialize_database,
)

__all__ = [
    "MigrationFailedError",
    "MigrationInfo",
    "MigrationResult",
    "create_backup",
    "discover_migrations",
    "initialize_database",
]
