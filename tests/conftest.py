"""Pytest configuration and fixtures for backend tests.

This module provides shared fixtures for testing the invocation log
function: SQLite-backed settings and runtimes, Lambda context stand-ins,
and isolation of environment and logging state.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any
from typing import Callable
from typing import Generator
from typing import Optional
from uuid import uuid4

import pytest

# Add backend source to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / 'backend' / 'src'))

_CONFIG_ENV_VARS = (
    'DATABASE_URL',
    'DATABASE_SECRET_ARN',
    'DATABASE_USERNAME',
    'DATABASE_HOST',
    'DATABASE_PORT',
    'DATABASE_NAME',
    'DATABASE_SSLMODE',
    'DATABASE_AUTO_MIGRATE',
    'DB_POOL_SIZE',
    'DB_MAX_OVERFLOW',
    'DB_POOL_RECYCLE',
    'DB_POOL_TIMEOUT',
    'LOG_LEVEL',
)


# --- Isolation Fixtures ---


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch) -> Generator[None, None, None]:
    """Remove configuration variables and cached secrets for each test."""
    from app.db.connection import clear_secret_cache

    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    clear_secret_cache()
    yield
    clear_secret_cache()


@pytest.fixture(autouse=True)
def restore_logging() -> Generator[None, None, None]:
    """Undo configure_logging() changes to the root logger."""
    from app.utils.logging import StructuredLogFormatter, clear_request_context

    root_logger = logging.getLogger()
    level = root_logger.level

    yield

    clear_request_context()
    logging.captureWarnings(False)
    for handler in root_logger.handlers[:]:
        if isinstance(handler.formatter, StructuredLogFormatter):
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)


# --- Database Fixtures ---


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """URL of an empty SQLite database file private to the test."""
    return f'sqlite:///{tmp_path / "lambdalogs.db"}'


@pytest.fixture
def settings(database_url: str):
    """Settings pointing at the test database."""
    from app.config import Settings

    return Settings(database_url=database_url, log_level='DEBUG')


@pytest.fixture
def schema(database_url: str) -> str:
    """Create the invocation log schema in the test database."""
    from sqlalchemy import create_engine

    from app.db.base import Base
    from app.db import models  # noqa: F401

    engine = create_engine(database_url)
    Base.metadata.create_all(engine)
    engine.dispose()
    return database_url


@pytest.fixture
def client(settings, schema):
    """Connected persistence client with the schema in place."""
    from app.db.engine import connect

    persistence_client = connect(settings)
    yield persistence_client
    persistence_client.dispose()


@pytest.fixture
def runtime(settings, schema):
    """Freshly bootstrapped runtime, as in a new execution environment."""
    from app.bootstrap import bootstrap

    fresh_runtime = bootstrap(settings)
    yield fresh_runtime
    fresh_runtime.client.dispose()


# --- Lambda Context Fixtures ---


class FakeLambdaContext:
    """Minimal stand-in for the Lambda context object."""

    def __init__(
        self,
        aws_request_id: Optional[str] = None,
        log_stream_name: str = '2026/10/17/[$LATEST]abcdef0123456789',
        memory_limit_in_mb: Any = '128',
        remaining_time_ms: int = 3000,
    ):
        self.aws_request_id = aws_request_id or str(uuid4())
        self.log_stream_name = log_stream_name
        self.memory_limit_in_mb = memory_limit_in_mb
        self.function_name = 'invocation-log'
        self._remaining_time_ms = remaining_time_ms

    def get_remaining_time_in_millis(self) -> int:
        return self._remaining_time_ms


@pytest.fixture
def make_context() -> Callable[..., FakeLambdaContext]:
    """Factory for Lambda context stand-ins."""
    return FakeLambdaContext


@pytest.fixture
def lambda_context() -> FakeLambdaContext:
    """A Lambda context with a random request ID."""
    return FakeLambdaContext()


# --- Mock Fixtures ---


@pytest.fixture
def mock_boto3_client(mocker):
    """Mock boto3 client for AWS service calls."""
    mock = mocker.patch('boto3.client')
    return mock


# --- Query Helpers ---


@pytest.fixture
def count_rows() -> Callable[[str], int]:
    """Return a function counting invocation log rows in a database."""
    return _count_rows


def _count_rows(database_url: str) -> int:
    from sqlalchemy import create_engine
    from sqlalchemy.orm import Session

    from app.db.repositories import InvocationLogRepository

    engine = create_engine(database_url)
    try:
        with Session(engine) as session:
            return InvocationLogRepository(session).count()
    finally:
        engine.dispose()


@pytest.fixture
def fetch_row() -> Callable[[str, str], Any]:
    """Return a function loading the invocation log row for a request ID."""
    return _fetch_row


def _fetch_row(database_url: str, aws_request_id: str) -> Any:
    from sqlalchemy import create_engine
    from sqlalchemy import select
    from sqlalchemy.orm import Session

    from app.db.models import InvocationLog

    engine = create_engine(database_url)
    try:
        with Session(engine) as session:
            query = select(InvocationLog).where(
                InvocationLog.aws_request_id == aws_request_id
            )
            return session.execute(query).scalars().first()
    finally:
        engine.dispose()
