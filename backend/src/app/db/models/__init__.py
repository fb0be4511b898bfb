"""SQLAlchemy models for invocation logs."""

from app.db.models.invocation_log import INVOCATION_LOG_TABLE
from app.db.models.invocation_log import InvocationLog

__all__ = [
    "INVOCATION_LOG_TABLE",
    "InvocationLog",
]
