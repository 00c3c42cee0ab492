"""Response models shared across routes."""

from datetime import datetime, timezone
from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp() -> str:
    """ISO 8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, matching the processor's API."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class HealthResponse(BaseModel):
    """Health check payload."""

    status: str = "healthy"
    timestamp: str = Field(default_factory=iso_timestamp)
    environment: str
    version: str


class ClientSessionResponse(CamelModel):
    """Client token handed back to the browser."""

    client_token: str | None = None
    order_id: str
    amount: int
    currency: str
    expires_at: str | None = None


class ChargeResponse(CamelModel):
    """Result of charging a vaulted payment method."""

    success: bool = True
    payment: dict[str, Any]
    message: str


class WebhookAck(CamelModel):
    """Acknowledgement returned for every verified, parseable webhook."""

    received: bool = True
    event_type: Any = None
    payment_id: Any = None
    timestamp: datetime = Field(default_factory=utc_now)

    @field_serializer("timestamp")
    def serialize_datetime(self, value: datetime) -> str:
        return value.isoformat()


class ErrorResponse(BaseModel):
    """Body of every error response; ``error`` is always present."""

    error: str
    message: str | None = None
    details: Any = None
    debug: Any = None
    timestamp: str = Field(default_factory=iso_timestamp)


def error_response(
    status_code: int,
    error: str,
    *,
    message: str | None = None,
    details: Any = None,
    debug: Any = None,
) -> JSONResponse:
    """JSON error body with ``error`` and ``timestamp``; empty optional fields are omitted."""
    body = ErrorResponse(error=error, message=message, details=details, debug=debug)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))
