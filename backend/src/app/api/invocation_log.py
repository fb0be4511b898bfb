"""Lambda handler that logs each invocation to the database.

Each invocation increments the environment's counter, builds a record
from the event and the Lambda context, writes it through the shared
persistence client and echoes the counter back to the caller.
"""

from __future__ import annotations

import time
from typing import Any

from app.api.schemas import InvocationResponseSchema
from app.bootstrap import Runtime
from app.services.records import InvocationRequest
from app.services.records import build_record
from app.utils.logging import clear_request_context
from app.utils.logging import get_logger
from app.utils.logging import log_lambda_event
from app.utils.logging import log_response
from app.utils.logging import set_request_context

logger = get_logger(__name__)


def handle_invocation(event: Any, context: Any, runtime: Runtime) -> dict[str, Any]:
    """Handle one Lambda invocation.

    The counter is incremented before the write and is not rolled back
    if the write fails.

    Args:
        event: The Lambda event payload.
        context: The Lambda context object.
        runtime: Process-wide state created at bootstrap.

    Returns:
        The response payload.

    Raises:
        WriteError: If the record could not be persisted. The Lambda
            runtime reports the invocation as failed.
    """
    start_time = time.perf_counter()
    request = InvocationRequest.from_lambda(event, context)
    set_request_context(req_id=request.request_id, inst_id=request.instance_id)

    try:
        log_lambda_event(logger, event)
        invocation_count = runtime.counter.next()
        record = build_record(request, invocation_count)

        try:
            ack = runtime.client.write(record)
        except Exception:
            logger.exception("Internal error occurred in the lambda function")
            log_response(
                logger,
                invocation_count,
                succeeded=False,
                duration_ms=(time.perf_counter() - start_time) * 1000,
            )
            raise

        logger.info(
            "Log record inserted into DB",
            extra={"invocation_count": invocation_count, "record_id": ack.record_id},
        )
        response = InvocationResponseSchema(
            invocation_count=invocation_count,
            message_received=record.message,
            request_id=record.request_id,
            database_url=runtime.client.redacted_url,
        )
        log_response(
            logger,
            invocation_count,
            succeeded=True,
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )
        return response.to_payload()
    finally:
        clear_request_context()
