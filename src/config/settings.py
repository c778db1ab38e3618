"""
Stockroom settings.

Every value can be overridden from the environment (or a ``.env`` file) using
the prefix of its section, e.g. ``INVENTORY_MAX_BULK_ROWS=200`` or
``STORAGE_DATA_DIR=/var/lib/stockroom``.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Where the SQLite database lives and how it is pooled."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "stockroom.db"
    pool_size: int = Field(default=5, ge=1)
    busy_timeout: int = Field(default=30000, ge=0, description="milliseconds")

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    """HTTP server and upload limits."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]

    max_upload_size: int = Field(default=5 * 1024 * 1024, gt=0)
    allowed_import_extensions: list[str] = [".xlsx", ".xls", ".csv"]

    @field_validator("allowed_import_extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        normalized = []
        for ext in v:
            ext = ext.strip().lower()
            if ext and not ext.startswith("."):
                ext = "." + ext
            if ext and ext not in normalized:
                normalized.append(ext)
        return normalized


class InventorySettings(BaseSettings):
    """Stock rules: bulk limits, retry policy for conflicting writes, history paging."""

    model_config = SettingsConfigDict(env_prefix="INVENTORY_")

    max_bulk_rows: int = Field(default=1000, ge=1)
    default_unit: str = "pcs"

    cas_max_attempts: int = Field(default=5, ge=1)
    cas_retry_delay: float = Field(default=0.05, ge=0, description="base backoff in seconds")

    history_default_limit: int = Field(default=50, ge=1)
    history_max_limit: int = Field(default=500, ge=1)

    @model_validator(mode="after")
    def check_history_limits(self) -> "InventorySettings":
        if self.history_default_limit > self.history_max_limit:
            raise ValueError("history_default_limit cannot exceed history_max_limit")
        return self


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Stockroom"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    inventory: InventorySettings = Field(default_factory=InventorySettings)

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first use."""
    return Settings()


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
