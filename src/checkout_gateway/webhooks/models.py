"""Inbound webhook event models."""

from enum import Enum
from typing import Annotated, Any

from pydantic import BeforeValidator, ConfigDict

from checkout_gateway.core.base_models import CamelModel


class WebhookEventType(str, Enum):
    """Payment event types with a dedicated handler."""

    PAYMENT_CREATED = "PAYMENT_CREATED"
    PAYMENT_AUTHORIZED = "PAYMENT_AUTHORIZED"
    PAYMENT_CAPTURED = "PAYMENT_CAPTURED"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    PAYMENT_CANCELLED = "PAYMENT_CANCELLED"


def _object_or_none(v: Any) -> Any:
    return v if isinstance(v, dict) else None


class WebhookPayment(CamelModel):
    """Payment fields read from a webhook; values are kept exactly as sent."""

    model_config = ConfigDict(extra="allow")

    id: Any = None
    order_id: Any = None
    amount: Any = None
    currency_code: Any = None
    status: Any = None
    failure_reason: Any = None
    payment_method_type: Any = None


class WebhookEventData(CamelModel):
    model_config = ConfigDict(extra="allow")

    payment: Annotated[WebhookPayment | None, BeforeValidator(_object_or_none)] = None


class WebhookEvent(CamelModel):
    """
    A processor notification.

    Parsing never rejects a JSON object: ``eventType`` and the payment fields
    are echoed back exactly as received, and a ``data`` or ``payment`` that is
    not an object reads as missing.
    """

    model_config = ConfigDict(extra="allow")

    event_type: Any = None
    data: Annotated[WebhookEventData | None, BeforeValidator(_object_or_none)] = None

    @property
    def payment(self) -> WebhookPayment | None:
        return self.data.payment if self.data else None

    @property
    def payment_id(self) -> Any:
        return self.payment.id if self.payment else None

    @property
    def known_type(self) -> WebhookEventType | None:
        if not isinstance(self.event_type, str):
            return None
        try:
            return WebhookEventType(self.event_type)
        except ValueError:
            return None
