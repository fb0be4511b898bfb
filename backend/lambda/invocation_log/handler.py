"""Lambda entrypoint for the invocation log function.

Bootstrap runs once at import, during the Lambda init phase. The Runtime
it returns is reused by every invocation this execution environment
serves.
"""

from __future__ import annotations

from typing import Any

from app.api.invocation_log import handle_invocation
from app.bootstrap import bootstrap

RUNTIME = bootstrap()


def lambda_handler(event: Any, context: Any) -> dict[str, Any]:
    """Delegate to the invocation log handler."""

    return handle_invocation(event, context, RUNTIME)
