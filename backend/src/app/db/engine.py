"""Persistence client shared across Lambda invocations.

One PersistenceClient is created per execution environment at bootstrap
and handed to every invocation. Invocations only read the handle; they
never reconfigure, dispose or replace it.
"""

from __future__ import annotations

import time
from typing import Any
from typing import Optional
from typing import TYPE_CHECKING

from sqlalchemy import create_engine
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import PoolSettings
from app.config import Settings
from app.db.connection import is_postgresql_url
from app.db.connection import is_sqlite_url
from app.db.connection import redact_database_url
from app.db.writer import WriteAck
from app.db.writer import write_record
from app.exceptions import DatabaseConnectionError
from app.utils.logging import get_logger

if TYPE_CHECKING:
    from app.services.records import InvocationRecord

logger = get_logger(__name__)


class PersistenceClient:
    """Owns the SQLAlchemy engine for one process instance."""

    def __init__(self, engine: Engine, database_url: str):
        self._engine = engine
        self._redacted_url = redact_database_url(database_url)

    @property
    def engine(self) -> Engine:
        """Get the underlying engine."""
        return self._engine

    @property
    def redacted_url(self) -> str:
        """Database URL with credentials replaced, safe for logs and responses."""
        return self._redacted_url

    def session(self) -> Session:
        """Open a new ORM session bound to the shared engine."""
        return Session(self._engine)

    def write(self, record: InvocationRecord) -> WriteAck:
        """Persist one record.

        Raises:
            WriteError: If the insert or commit fails.
        """
        return write_record(self, record)

    def dispose(self) -> None:
        """Close pooled connections. Only used on shutdown and in tests."""
        self._engine.dispose()

    def __repr__(self) -> str:
        return f"PersistenceClient(url={self._redacted_url!r})"


def connect(settings: Settings) -> PersistenceClient:
    """Create the engine and verify that the database answers.

    Args:
        settings: Resolved settings for this process instance.

    Returns:
        A connected PersistenceClient.

    Raises:
        DatabaseConnectionError: If the URL is malformed, the driver is
            unavailable, or the database cannot be reached or
            authenticated against.
    """
    redacted = redact_database_url(settings.database_url)
    start_time = time.perf_counter()
    engine: Optional[Engine] = None

    try:
        engine = create_engine(
            settings.database_url,
            pool_pre_ping=True,
            connect_args=_get_connect_args(settings),
            **_get_pool_settings(settings.database_url, settings.pool),
        )
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except (SQLAlchemyError, ImportError) as exc:
        if engine is not None:
            engine.dispose()
        logger.error(
            f"Error trying to connect to database '{redacted}'",
            extra={"error": str(exc)},
        )
        raise DatabaseConnectionError(
            f"Unable to connect to database '{redacted}'",
            detail=str(exc),
        ) from exc

    latency_ms = (time.perf_counter() - start_time) * 1000
    logger.info(
        f"Connected to database '{redacted}'",
        extra={"latency_ms": round(latency_ms, 2)},
    )
    return PersistenceClient(engine, settings.database_url)


def _get_connect_args(settings: Settings) -> dict[str, str]:
    """Return connection arguments for the database driver."""
    if is_postgresql_url(settings.database_url):
        return {"sslmode": settings.sslmode}
    return {}


def _get_pool_settings(database_url: str, pool: PoolSettings) -> dict[str, Any]:
    """Return connection pool settings tuned for Lambda.

    SQLite keeps SQLAlchemy's default pool. Server databases get a
    minimal pool since one execution environment serves one request
    at a time.
    """
    if is_sqlite_url(database_url):
        return {}

    return {
        "pool_size": pool.pool_size,
        "max_overflow": pool.max_overflow,
        "pool_recycle": pool.pool_recycle,
        "pool_timeout": pool.pool_timeout,
    }
