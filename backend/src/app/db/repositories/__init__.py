"""Repository pattern implementations for database operations."""

from app.db.repositories.base import BaseRepository
from app.db.repositories.invocation_log import InvocationLogRepository

__all__ = [
    "BaseRepository",
    "InvocationLogRepository",
]
