"""
Versioned schema for the stock database.

Schema changes live next to this module as ``v<NNN>_<name>.sql`` scripts. A
script runs once; ``schema_migrations`` remembers its version and a short
SHA-256 of its text so an edited script can be spotted later. When a database
file already exists it is copied aside first, and the copy is put back if any
script fails, so a half-migrated stock ledger is never left behind.
"""

import hashlib
import re
import shutil
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import aiosqlite

from src.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
_SCRIPT_NAME = re.compile(r"v(?P<version>\d+)_(?P<name>.+)\.sql")

_RECORD_SQL = """
    INSERT OR REPLACE INTO schema_migrations (version, name, checksum, execution_time_ms)
    VALUES (?, ?, ?, ?)
"""


class MigrationFailedError(RuntimeError):
    """A schema script raised; the database was restored from its backup if one was taken."""


@dataclass
class MigrationInfo:
    version: str
    name: str
    path: Path
    checksum: str

    @property
    def label(self) -> str:
        return f"v{self.version}_{self.name}"

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        parsed = _SCRIPT_NAME.fullmatch(path.name)
        if parsed is None:
            raise ValueError(f"Invalid migration filename: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(
            version=parsed["version"],
            name=parsed["name"],
            path=path,
            checksum=digest[:16],
        )


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Scripts in ``directory`` ordered by version; misnamed files are logged and ignored."""
    found: list[MigrationInfo] = []
    for script in directory.glob("v*.sql"):
        try:
            found.append(MigrationInfo.from_file(script))
        except ValueError:
            logger.warning("migration_file_ignored", path=str(script))
    return sorted(found, key=lambda m: int(m.version))


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Version -> checksum for every recorded script; empty before the first run."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        return {}
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def apply_migration(conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
    started = time.perf_counter()

    def elapsed_ms() -> int:
        return int((time.perf_counter() - started) * 1000)

    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            _RECORD_SQL,
            (migration.version, migration.name, migration.checksum, elapsed_ms()),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", migration=migration.label, error=str(e))
        return MigrationResult(
            migration.version, migration.name, False, elapsed_ms(), error=str(e)
        )

    logger.info("migration_applied", migration=migration.label, execution_time_ms=elapsed_ms())
    return MigrationResult(migration.version, migration.name, True, elapsed_ms())


def create_backup(db_path: Path) -> Path:
    """Copy ``db_path`` to a timestamped sibling and return the copy's path."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_name(f"{db_path.stem}.backup_{stamp}{db_path.suffix or '.db'}")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


async def _apply_pending(db_path: Path) -> list[MigrationResult]:
    results: list[MigrationResult] = []
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")
        applied = await get_applied_migrations(conn)

        for migration in discover_migrations():
            recorded = applied.get(migration.version)
            if recorded is not None:
                if recorded != migration.checksum:
                    logger.warning("migration_script_changed", migration=migration.label)
                continue

            result = await apply_migration(conn, migration)
            results.append(result)
            if not result.success:
                raise MigrationFailedError(f"Migration {migration.label} failed: {result.error}")
    return results


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Bring the database at ``db_path`` (default: the configured one) up to date.

    Returns one result per script that was run; an up-to-date database gives
    an empty list. Raises ``MigrationFailedError`` after restoring the backup.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    backup_path = create_backup(db_path) if create_backup_before and db_path.exists() else None
    try:
        results = await _apply_pending(db_path)
    except MigrationFailedError:
        if backup_path is not None:
            shutil.copy2(backup_path, db_path)
            logger.warning("database_restored_from_backup", backup_path=str(backup_path))
        raise

    if backup_path is not None:
        backup_path.unlink()
    if results:
        logger.info("database_migrated", db_path=str(db_path), applied=len(results))
    return results
