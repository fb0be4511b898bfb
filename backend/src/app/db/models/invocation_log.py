"""Invocation log model."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger
from sqlalchemy import Index
from sqlalchemy import Integer
from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TIMESTAMP

from app.db.base import Base

INVOCATION_LOG_TABLE = "lambdalogs"


class InvocationLog(Base):
    """One row per handled Lambda invocation."""

    __tablename__ = INVOCATION_LOG_TABLE
    __table_args__ = (
        Index("lambdalogs_aws_request_id_idx", "aws_request_id"),
        Index("lambdalogs_instance_id_idx", "instance_id", "invocation_count"),
    )

    id: Mapped[int] = mapped_column(
        Integer(),
        primary_key=True,
        autoincrement=True,
    )
    timestamp: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        comment="UTC time the record was built",
    )
    invocation_count: Mapped[int] = mapped_column(
        Integer(),
        nullable=False,
        comment="Invocations served by the execution environment so far",
    )
    message: Mapped[str] = mapped_column(
        Text(),
        nullable=False,
    )
    aws_request_id: Mapped[str] = mapped_column(
        Text(),
        nullable=False,
        comment="Lambda request ID for correlation",
    )
    cpu_cores: Mapped[Optional[int]] = mapped_column(
        Integer(),
        nullable=True,
    )
    allocated_memory_mb: Mapped[Optional[int]] = mapped_column(
        Integer(),
        nullable=True,
        comment="Memory configured for the function",
    )
    execution_deadline_ms: Mapped[Optional[int]] = mapped_column(
        BigInteger(),
        nullable=True,
        comment="Epoch milliseconds at which the invocation times out",
    )
    instance_id: Mapped[Optional[str]] = mapped_column(
        Text(),
        nullable=True,
        comment="Execution environment (log stream) that served the request",
    )
