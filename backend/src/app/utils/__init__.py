"""Utility modules for the backend application."""

from app.utils.logging import (
    clear_request_context,
    configure_logging,
    get_logger,
    set_request_context,
)

__all__ = [
    "clear_request_context",
    "configure_logging",
    "get_logger",
    "set_request_context",
]
