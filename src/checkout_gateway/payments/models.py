"""Models for charging a vaulted payment method."""

from typing import Any

from pydantic import ConfigDict, EmailStr, Field

from checkout_gateway.core.base_models import CamelModel
from checkout_gateway.core.identifiers import generate_order_id
from checkout_gateway.sessions.models import (
    Amount,
    CurrencyCode,
    FirstPaymentReason,
    Identifier,
    PaymentType,
)


class ChargeRequest(CamelModel):
    """Merchant-initiated charge against a stored payment-method token."""

    model_config = ConfigDict(extra="ignore")

    payment_method_token: str = Field(..., min_length=1)
    amount: Amount
    currency_code: CurrencyCode
    order_id: Identifier | None = None
    payment_type: PaymentType | None = None
    first_payment_reason: FirstPaymentReason | None = None
    customer_id: Identifier | None = None
    customer_email: EmailStr | None = None
    description: str | None = Field(default=None, max_length=500)
    metadata: dict[str, Any] | None = None

    @property
    def masked_token(self) -> str:
        """Token prefix safe to log."""
        return f"{self.payment_method_token[:20]}..."

    def to_payment_request(self, order_id_factory=generate_order_id) -> dict[str, Any]:
        """Body for the processor's payments API."""
        body: dict[str, Any] = {
            "orderId": self.order_id or order_id_factory(),
            "amount": self.amount,
            "currencyCode": self.currency_code,
            "paymentMethodToken": self.payment_method_token,
        }
        if self.payment_type:
            body["paymentType"] = self.payment_type.value
        if self.customer_id:
            body["customerId"] = self.customer_id
        if self.description:
            body["description"] = self.description
        if self.metadata:
            body["metadata"] = self.metadata
        if self.first_payment_reason:
            body["paymentMethod"] = {"firstPaymentReason": self.first_payment_reason.value}
        return body
