from __future__ import annotations

import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from sqlalchemy import engine_from_config
from sqlalchemy import pool

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

base_dir = Path(__file__).resolve().parents[2]
if str(base_dir / "src") not in sys.path:
    sys.path.append(str(base_dir / "src"))

from app.db.base import Base  # noqa: E402
from app.db import models  # noqa: F401,E402
from app.db.connection import get_database_url as _resolve_database_url  # noqa: E402
from app.db.connection import is_sqlite_url  # noqa: E402

target_metadata = Base.metadata


def get_database_url() -> str:
    """Return the database URL from the Alembic config or environment."""
    url = config.get_main_option("sqlalchemy.url")
    if not url:
        url = _resolve_database_url()
    return url


def _escape_for_config(value: str) -> str:
    """Escape percent signs for configparser interpolation."""
    return value.replace("%", "%%")


def run_migrations_offline() -> None:
    """Run migrations in offline mode."""
    url = get_database_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        render_as_batch=is_sqlite_url(url),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in online mode."""
    url = get_database_url()
    config.set_main_option("sqlalchemy.url", _escape_for_config(url))
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=is_sqlite_url(url),
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
