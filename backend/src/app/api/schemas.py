"""Pydantic schemas for invocation log events and responses."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import StrictStr


class InvocationEventSchema(BaseModel):
    """Inbound event payload.

    Only ``message`` is read; any other fields are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    message: Optional[StrictStr] = None


class InvocationResponseSchema(BaseModel):
    """Outbound response returned to the invoker."""

    model_config = ConfigDict(populate_by_name=True)

    invocation_count: int = Field(alias="invocationCount")
    status: str = "ok"
    action: str = "Log record inserted into DB"
    message_received: str = Field(alias="messageReceived")
    request_id: str = Field(alias="requestId")
    database_url: str = Field(alias="databaseUrl")

    def to_payload(self) -> dict:
        """Serialize using the camelCase wire names."""
        return self.model_dump(by_alias=True)
