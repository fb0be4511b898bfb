"""Database utilities and models."""

from app.db.base import Base
from app.db.models import InvocationLog

__all__ = [
    "Base",
    "InvocationLog",
]
