"""Build invocation log records from Lambda events.

A record combines the event's ``message`` with the ambient context of the
invocation: the counter snapshot, the request ID, the execution
environment and the time budget. Building never fails. A malformed
optional message degrades to DEFAULT_MESSAGE and issues a
MalformedInputWarning.
"""

from __future__ import annotations

import os
import warnings
from dataclasses import asdict
from dataclasses import dataclass
from datetime import datetime
from datetime import timezone
from typing import Any
from typing import Mapping
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from app.api.schemas import InvocationEventSchema
from app.exceptions import MalformedInputWarning

DEFAULT_MESSAGE = "Missing input payload message"


@dataclass(frozen=True)
class InvocationRequest:
    """One event plus the ambient context of its invocation."""

    payload: Any
    request_id: str
    remaining_time_ms: Optional[int] = None
    instance_id: Optional[str] = None
    memory_limit_mb: Optional[int] = None

    @classmethod
    def from_lambda(cls, event: Any, context: Any) -> "InvocationRequest":
        """Extract the request from a Lambda event and context object."""
        get_remaining = getattr(context, "get_remaining_time_in_millis", None)
        return cls(
            payload=event,
            request_id=str(getattr(context, "aws_request_id", "") or ""),
            remaining_time_ms=_optional_int(get_remaining() if get_remaining else None),
            instance_id=getattr(context, "log_stream_name", None) or None,
            memory_limit_mb=_optional_int(getattr(context, "memory_limit_in_mb", None)),
        )


@dataclass(frozen=True)
class InvocationRecord:
    """Immutable durable artifact written once per invocation."""

    message: str
    invocation_count: int
    request_id: str
    timestamp: datetime
    cpu_cores: Optional[int] = None
    allocated_memory_mb: Optional[int] = None
    execution_deadline_ms: Optional[int] = None
    instance_id: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary of column values."""
        return asdict(self)


def build_record(
    request: InvocationRequest,
    invocation_count: int,
    now: Optional[datetime] = None,
) -> InvocationRecord:
    """Map a request and counter snapshot to a record.

    Args:
        request: The invocation request.
        invocation_count: Counter value after this invocation's increment.
        now: Record timestamp; defaults to the current UTC time.

    Returns:
        The built record.
    """
    timestamp = now or datetime.now(timezone.utc)

    deadline_ms = None
    if request.remaining_time_ms is not None:
        deadline_ms = int(timestamp.timestamp() * 1000) + request.remaining_time_ms

    return InvocationRecord(
        message=extract_message(request.payload),
        invocation_count=invocation_count,
        request_id=request.request_id,
        timestamp=timestamp,
        cpu_cores=os.cpu_count(),
        allocated_memory_mb=request.memory_limit_mb,
        execution_deadline_ms=deadline_ms,
        instance_id=request.instance_id,
    )


def extract_message(payload: Any) -> str:
    """Return the event's message, or DEFAULT_MESSAGE if absent or invalid."""
    if not isinstance(payload, Mapping):
        warnings.warn(
            f"Event payload is a {type(payload).__name__}, expected an object",
            MalformedInputWarning,
            stacklevel=3,
        )
        return DEFAULT_MESSAGE

    try:
        parsed = InvocationEventSchema.model_validate(dict(payload))
    except PydanticValidationError as exc:
        warnings.warn(
            f"Ignoring malformed message field: {exc.errors()[0]['msg']}",
            MalformedInputWarning,
            stacklevel=3,
        )
        return DEFAULT_MESSAGE

    if parsed.message is None:
        return DEFAULT_MESSAGE

    try:
        parsed.message.encode("utf-8")
    except UnicodeEncodeError:
        warnings.warn(
            "Ignoring message field that is not valid UTF-8 text",
            MalformedInputWarning,
            stacklevel=3,
        )
        return DEFAULT_MESSAGE
    return parsed.message


def _optional_int(value: Any) -> Optional[int]:
    """Coerce a context attribute to int, or None if unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
