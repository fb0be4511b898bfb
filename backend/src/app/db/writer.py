"""Single-attempt persistence of invocation records."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from app.db.repositories.invocation_log import InvocationLogRepository
from app.exceptions import WriteError
from app.utils.logging import get_logger

if TYPE_CHECKING:
    from app.db.engine import PersistenceClient
    from app.services.records import InvocationRecord

logger = get_logger(__name__)


@dataclass(frozen=True)
class WriteAck:
    """Acknowledgement of a persisted record."""

    record_id: int
    latency_ms: float


def write_record(client: PersistenceClient, record: InvocationRecord) -> WriteAck:
    """Insert a record in its own transaction.

    There is no retry; a failed write is for the invoker to redeliver.

    Args:
        client: The shared persistence client.
        record: The record to persist.

    Returns:
        WriteAck with the generated row ID.

    Raises:
        WriteError: If the insert or the commit fails. The transaction
            is rolled back.
    """
    start_time = time.perf_counter()

    try:
        with client.session() as session, session.begin():
            row = InvocationLogRepository(session).insert_record(record)
            record_id = row.id
    except SQLAlchemyError as exc:
        logger.error(
            "Error inserting invocation record",
            extra={"invocation_count": record.invocation_count, "error": str(exc)},
        )
        raise WriteError(
            "Failed to persist invocation record",
            detail=str(exc),
        ) from exc

    latency_ms = (time.perf_counter() - start_time) * 1000
    logger.debug(
        "Invocation record inserted",
        extra={"record_id": record_id, "latency_ms": round(latency_ms, 2)},
    )
    return WriteAck(record_id=record_id, latency_ms=latency_ms)
