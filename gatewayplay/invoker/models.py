"""Wire models for the /gateway endpoint."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GatewayRequest(BaseModel):
    """Request described to the gateway: which upstream path to call and how."""
    path: str = "/"
    method: str = "GET"
    query: dict[str, Any] | None = None
    body: dict[str, Any] | None = None

    def wire_payload(self) -> dict[str, Any]:
        """JSON payload sent to the gateway; unset optional fields are left out."""
        return self.model_dump(exclude_none=True)


class GatewayResponse(BaseModel):
    """Envelope returned by the gateway."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    success: bool = False
    status_code: int | None = Field(default=None, alias="status-code")
    status_message: str | None = Field(default=None, alias="status-message")
    http_version: str | None = Field(default=None, alias="http-version")
    headers: dict[str, str] | None = None
    body: str | None = None
    error: str | None = None
    reason: str | None = None

    def wire_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ResultStyle(str, Enum):
    """Visual style of a rendered outcome (maps to a bg-* css class)."""

    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


class Outcome(str, Enum):
    """Terminal state of one invocation."""

    SUCCESS = "success"
    STRUCTURED_ERROR = "structured_error"
    TRANSPORT_ERROR = "transport_error"


class RenderedResult(BaseModel):
    """What an invocation wrote to the output element."""
    outcome: Outcome
    style: ResultStyle
    text: str
    html: str
    response: GatewayResponse | None = None
