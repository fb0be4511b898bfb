"""Runtime settings resolved once per Lambda execution environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

from app.db.connection import get_database_url
from app.db.connection import redact_database_url
from app.exceptions import ConfigurationError

DEFAULT_LOG_LEVEL = "INFO"

_VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
_TRUTHY = {"1", "true", "yes"}


@dataclass(frozen=True)
class PoolSettings:
    """Connection pool settings for server databases."""

    pool_size: int = 1
    max_overflow: int = 0
    pool_recycle: int = 300
    pool_timeout: int = 30


@dataclass(frozen=True)
class Settings:
    """Immutable configuration for one process instance.

    Attributes:
        database_url: SQLAlchemy database URL (may contain credentials).
        log_level: Logging verbosity name.
        auto_migrate: Run Alembic migrations during bootstrap.
        sslmode: PostgreSQL sslmode connect argument.
        pool: Connection pool settings.
    """

    database_url: str
    log_level: str = DEFAULT_LOG_LEVEL
    auto_migrate: bool = False
    sslmode: str = "require"
    pool: PoolSettings = PoolSettings()

    def __repr__(self) -> str:
        return (
            f"Settings(database_url={redact_database_url(self.database_url)!r}, "
            f"log_level={self.log_level!r}, auto_migrate={self.auto_migrate!r})"
        )


def resolve_settings() -> Settings:
    """Read settings from the process environment.

    Raises:
        ConfigurationError: If the database URL is missing or a setting
            has an invalid value.
    """
    database_url = get_database_url()

    log_level = (os.getenv("LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
    if log_level not in _VALID_LOG_LEVELS:
        raise ConfigurationError(
            "LOG_LEVEL",
            detail=f"Unsupported log level: {log_level}",
            missing=False,
        )

    return Settings(
        database_url=database_url,
        log_level=log_level,
        auto_migrate=str(os.getenv("DATABASE_AUTO_MIGRATE", "")).lower() in _TRUTHY,
        sslmode=os.getenv("DATABASE_SSLMODE", "require"),
        pool=PoolSettings(
            pool_size=_int_env("DB_POOL_SIZE", 1),
            max_overflow=_int_env("DB_MAX_OVERFLOW", 0),
            pool_recycle=_int_env("DB_POOL_RECYCLE", 300),
            pool_timeout=_int_env("DB_POOL_TIMEOUT", 30),
        ),
    )


def _int_env(name: str, default: int) -> int:
    """Parse a non-negative integer environment variable."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            name, detail=f"Expected an integer: {raw}", missing=False
        ) from exc
    if value < 0:
        raise ConfigurationError(
            name, detail=f"Must not be negative: {raw}", missing=False
        )
    return value
