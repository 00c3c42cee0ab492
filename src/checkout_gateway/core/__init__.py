"""Core shared functionality for the checkout gateway."""

from checkout_gateway.core.base_models import (
    ChargeResponse,
    ClientSessionResponse,
    ErrorResponse,
    HealthResponse,
    WebhookAck,
)
from checkout_gateway.core.retry import RetryPolicy, retry_with_backoff

__all__ = [
    "ChargeResponse",
    "ClientSessionResponse",
    "ErrorResponse",
    "HealthResponse",
    "RetryPolicy",
    "WebhookAck",
    "retry_with_backoff",
]
