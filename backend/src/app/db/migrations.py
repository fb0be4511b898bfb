"""Migration execution helpers."""

from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config

from app.db.connection import redact_database_url
from app.utils.logging import get_logger

logger = get_logger(__name__)

# backend/src/app/db/migrations.py -> backend/db/alembic
ALEMBIC_SCRIPT_LOCATION = Path(__file__).resolve().parents[3] / "db" / "alembic"


def _escape_config(value: str) -> str:
    """Escape percent signs for configparser interpolation."""
    return value.replace("%", "%%")


def run_migrations(database_url: str, revision: str = "head") -> None:
    """Run Alembic migrations up to a revision."""
    config = Config()
    config.set_main_option("script_location", str(ALEMBIC_SCRIPT_LOCATION))
    config.set_main_option("sqlalchemy.url", _escape_config(database_url))
    logger.info(
        f"Running migrations to {revision}",
        extra={"database_url": redact_database_url(database_url)},
    )
    command.upgrade(config, revision)
