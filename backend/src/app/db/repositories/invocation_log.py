"""Repository for invocation log rows."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.db.models import InvocationLog
from app.db.repositories.base import BaseRepository

if TYPE_CHECKING:
    from app.services.records import InvocationRecord


class InvocationLogRepository(BaseRepository[InvocationLog]):
    """Repository for InvocationLog entities."""

    def __init__(self, session: Session):
        super().__init__(session, InvocationLog)

    def insert_record(self, record: InvocationRecord) -> InvocationLog:
        """Insert one record and return the stored row."""
        row = InvocationLog(
            timestamp=record.timestamp,
            invocation_count=record.invocation_count,
            message=record.message,
            aws_request_id=record.request_id,
            cpu_cores=record.cpu_cores,
            allocated_memory_mb=record.allocated_memory_mb,
            execution_deadline_ms=record.execution_deadline_ms,
            instance_id=record.instance_id,
        )
        return self.create(row)
