"""Base repository with common persistence operations."""

from __future__ import annotations

from typing import Generic
from typing import Type
from typing import TypeVar

from sqlalchemy import func
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Base repository for one SQLAlchemy model type."""

    def __init__(self, session: Session, model: Type[T]):
        self._session = session
        self._model = model

    def create(self, entity: T) -> T:
        """Add an entity and flush so generated fields are populated."""
        self._session.add(entity)
        self._session.flush()
        self._session.refresh(entity)
        return entity

    def count(self) -> int:
        """Count stored entities."""
        result = self._session.execute(select(func.count()).select_from(self._model))
        return result.scalar() or 0
