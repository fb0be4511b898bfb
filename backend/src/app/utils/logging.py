"""Structured logging utilities for Lambda functions.

This module provides JSON-formatted logging with request context,
suitable for CloudWatch Logs Insights queries.

SECURITY NOTES:
- Database URLs carry credentials; log them only through
  app.db.connection.redact_database_url()
- Never log passwords, tokens, or secrets
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from contextvars import ContextVar
from datetime import datetime
from datetime import timezone
from typing import Any
from typing import Mapping
from typing import MutableMapping
from typing import Optional

# Context variables for request tracking
request_id: ContextVar[str] = ContextVar("request_id", default="")
instance_id: ContextVar[str] = ContextVar("instance_id", default="")

_NOISY_LOGGERS = (
    "alembic",
    "boto3",
    "botocore",
    "urllib3",
    "sqlalchemy.engine",
)


class StructuredLogFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Produces log entries compatible with CloudWatch Logs Insights,
    including request context and exception details.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        req_id = request_id.get()
        if req_id:
            log_data["request_id"] = req_id

        inst_id = instance_id.get()
        if inst_id:
            log_data["instance_id"] = inst_id

        if record.levelno >= logging.WARNING or record.levelno == logging.DEBUG:
            log_data["source"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info),
            }

        extra = getattr(record, "extra", None)
        if isinstance(extra, dict) and extra:
            log_data["extra"] = extra

        return json.dumps(log_data, default=str)


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that nests context and call-site extras under "extra"."""

    def process(
        self,
        msg: str,
        kwargs: MutableMapping[str, Any],
    ) -> tuple[str, MutableMapping[str, Any]]:
        """Merge adapter context with the extras passed to the call."""
        extra: dict[str, Any] = dict(self.extra or {})
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = {"extra": extra}
        return msg, kwargs


def configure_logging(level: Optional[str] = None) -> None:
    """Configure structured logging for Lambda execution.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to
               LOG_LEVEL environment variable or INFO.
    """
    log_level: str = (level or os.getenv("LOG_LEVEL") or "INFO").upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # The Lambda runtime pre-installs its own handler
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredLogFormatter())
    root_logger.addHandler(handler)

    logging.captureWarnings(True)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str, **extra: Any) -> ContextLogger:
    """Get a context-aware logger.

    Args:
        name: Logger name (typically __name__).
        **extra: Additional context to include in all log messages.

    Returns:
        A ContextLogger instance.
    """
    logger = logging.getLogger(name)
    return ContextLogger(logger, extra)


def set_request_context(
    req_id: Optional[str] = None,
    inst_id: Optional[str] = None,
) -> None:
    """Set request context for logging.

    Call this at the start of each Lambda invocation.

    Args:
        req_id: AWS request ID from the Lambda context.
        inst_id: Execution environment identifier (the log stream name).
    """
    if req_id:
        request_id.set(req_id)
    if inst_id:
        instance_id.set(inst_id)


def clear_request_context() -> None:
    """Clear request context after Lambda invocation."""
    request_id.set("")
    instance_id.set("")


def log_lambda_event(logger: ContextLogger, event: Any) -> None:
    """Log the shape of a Lambda event at DEBUG level.

    Only the top-level keys are logged; payload values may contain PII.
    """
    if isinstance(event, Mapping):
        shape: Any = sorted(str(key) for key in event.keys())
    else:
        shape = type(event).__name__
    logger.debug("Lambda event received", extra={"event_keys": shape})


def log_response(
    logger: ContextLogger,
    invocation_count: int,
    succeeded: bool,
    duration_ms: Optional[float] = None,
) -> None:
    """Log the outcome of one invocation.

    Args:
        logger: The logger to use.
        invocation_count: Counter value issued to the invocation.
        succeeded: Whether the record was persisted.
        duration_ms: Invocation duration in milliseconds.
    """
    log_data: dict[str, Any] = {
        "invocation_count": invocation_count,
        "succeeded": succeeded,
    }
    if duration_ms is not None:
        log_data["duration_ms"] = round(duration_ms, 2)

    level = logging.INFO if succeeded else logging.WARNING
    logger.log(level, "Lambda response", extra={"response": log_data})
