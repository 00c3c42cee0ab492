"""Client-session request and payload models.

Inbound session requests arrive in one of two shapes: the simplified shape the
storefront sends, or the processor's own client-session shape passed through by
integrators. Both are parsed up front into a tagged union and normalized into a
single ``CanonicalOrderPayload``.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BeforeValidator,
    ConfigDict,
    Discriminator,
    EmailStr,
    Field,
    PositiveInt,
    Tag,
    TypeAdapter,
)

from checkout_gateway.core.base_models import CamelModel

MAX_AMOUNT = 9_999_999
DEFAULT_AMOUNT = 4999
DEFAULT_CURRENCY = "GBP"
DEFAULT_COUNTRY_CODE = "GB"
PLACEHOLDER_EMAIL = "demo@example.com"

# Keys whose presence marks a request as the processor-native shape
NATIVE_SHAPE_KEYS = ("orderId", "currencyCode", "order", "order_id", "currency_code")


class PaymentType(str, Enum):
    """Processor payment type (API v2.4+)."""

    FIRST_PAYMENT = "FIRST_PAYMENT"
    ECOMMERCE = "ECOMMERCE"
    SUBSCRIPTION = "SUBSCRIPTION"
    UNSCHEDULED = "UNSCHEDULED"


class FirstPaymentReason(str, Enum):
    """Why a payment method is being stored on its first use."""

    CARD_ON_FILE = "CardOnFile"
    RECURRING = "Recurring"
    UNSCHEDULED = "Unscheduled"


def _uppercase(v: Any) -> Any:
    return v.upper() if isinstance(v, str) else v


def to_minor_units(value: Any) -> Any:
    """
    Parse an amount exactly and round it half-up to integer minor units.

    Whole amounts pass through unchanged. Anything that is not a finite number
    is returned as-is for the integer validation to reject.
    """
    if isinstance(value, bool):
        raise ValueError("Input should be a number")
    if not isinstance(value, (int, float, str, Decimal)):
        return value
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return value
    if not amount.is_finite():
        return value
    return int(amount.to_integral_value(rounding=ROUND_HALF_UP))


CurrencyCode = Annotated[Literal["GBP", "USD", "EUR", "JPY"], BeforeValidator(_uppercase)]
CountryCode = Annotated[
    str, BeforeValidator(_uppercase), Field(min_length=2, max_length=2, pattern=r"^[A-Z]{2}$")
]
# Rounded before the bounds are checked, so 0.4 is rejected as 0
Amount = Annotated[int, BeforeValidator(to_minor_units), Field(gt=0, le=MAX_AMOUNT)]
LineAmount = Annotated[int, BeforeValidator(to_minor_units), Field(gt=0)]
Identifier = Annotated[str, Field(min_length=1, max_length=256)]


# =============================================================================
# Shared nested objects (processor client-session format)
# =============================================================================


class LineItem(CamelModel):
    """A single order line in minor units."""

    model_config = ConfigDict(extra="allow")

    item_id: str
    description: str
    amount: LineAmount
    quantity: PositiveInt


class Order(CamelModel):
    """Order details; ``lineItems`` may be omitted by callers."""

    model_config = ConfigDict(extra="allow")

    country_code: CountryCode | None = None
    line_items: list[LineItem] | None = None


class Customer(CamelModel):
    model_config = ConfigDict(extra="allow")

    email_address: EmailStr | None = None


class PaymentSummaryItem(CamelModel):
    label: str
    amount: int
    type: Literal["final", "pending"]


class ApplePayOptions(CamelModel):
    """Apple Pay specific options nested under ``paymentMethod.options.APPLE_PAY``."""

    model_config = ConfigDict(extra="allow")

    merchant_name: str | None = None
    merchant_display_name: str | None = None
    merchant_capabilities: list[str] | None = None
    payment_summary_items: list[PaymentSummaryItem] | None = None
    recurring_payment_request: dict[str, Any] | None = None
    deferred_payment_request: dict[str, Any] | None = None
    automatic_reload_request: dict[str, Any] | None = None


class PaymentMethodOptions(CamelModel):
    model_config = ConfigDict(extra="allow")

    apple_pay: ApplePayOptions | None = Field(default=None, alias="APPLE_PAY")


class PaymentMethod(CamelModel):
    """Payment method configuration (vaulting, recurring reason, wallet options)."""

    model_config = ConfigDict(extra="allow")

    vault_on_success: bool | None = None
    first_payment_reason: FirstPaymentReason | None = None
    options: PaymentMethodOptions | None = None


# =============================================================================
# Inbound request variants
# =============================================================================


class CartItem(CamelModel):
    """Line item in the simplified storefront shape."""

    id: str
    name: str
    amount: LineAmount
    quantity: PositiveInt


class SimplifiedSessionRequest(CamelModel):
    """Storefront shape; unrecognized fields are dropped."""

    model_config = ConfigDict(extra="ignore")

    user_id: str | None = Field(default=None, min_length=1, max_length=100)
    cart_id: str | None = Field(default=None, min_length=1, max_length=100)
    amount: Amount | None = None
    currency: CurrencyCode = DEFAULT_CURRENCY
    customer_email: EmailStr | None = None
    customer_id: Identifier | None = None
    items: list[CartItem] | None = None

    # Apple Pay
    country_code: CountryCode = DEFAULT_COUNTRY_CODE
    apple_pay_merchant_name: str | None = Field(default=None, min_length=1, max_length=128)
    apple_pay_recurring: bool = False
    apple_pay_deferred: bool = False
    apple_pay_auto_reload: bool = False

    # Recurring payments
    payment_type: PaymentType | None = None
    first_payment_reason: FirstPaymentReason | None = None


class NativeSessionRequest(CamelModel):
    """Processor client-session shape; unknown fields are kept for pass-through."""

    model_config = ConfigDict(extra="allow")

    order_id: Identifier | None = None
    currency_code: CurrencyCode | None = None
    amount: Amount | None = None
    customer_id: Identifier | None = None
    customer: Customer | None = None
    order: Order | None = None
    payment_method: PaymentMethod | None = None
    payment_type: PaymentType | None = None
    metadata: dict[str, Any] | None = None

    # Simplified-shape fields used as fallbacks, never forwarded
    currency: CurrencyCode | None = None
    customer_email: EmailStr | None = None
    country_code: CountryCode | None = None
    user_id: str | None = Field(default=None, min_length=1, max_length=100)
    cart_id: str | None = Field(default=None, min_length=1, max_length=100)


def get_session_request_discriminator(v: Any) -> str:
    """
    Route a session request to its variant.

    Any of ``orderId``, ``currencyCode`` or ``order`` marks the processor-native
    shape; everything else is the simplified shape.
    """
    if isinstance(v, dict):
        if any(v.get(key) is not None for key in NATIVE_SHAPE_KEYS):
            return "native"
        return "simplified"
    if isinstance(v, NativeSessionRequest):
        return "native"
    return "simplified"


SessionRequest = Annotated[
    Union[
        Annotated[SimplifiedSessionRequest, Tag("simplified")],
        Annotated[NativeSessionRequest, Tag("native")],
    ],
    Discriminator(get_session_request_discriminator),
]

SessionRequestAdapter = TypeAdapter(SessionRequest)


# =============================================================================
# Outbound payload
# =============================================================================


class CanonicalOrder(Order):
    country_code: CountryCode = DEFAULT_COUNTRY_CODE
    line_items: list[LineItem] = Field(..., min_length=1)


class CanonicalOrderPayload(CamelModel):
    """The single client-session payload sent to the processor."""

    model_config = ConfigDict(extra="allow", frozen=True)

    order_id: str
    currency_code: str
    amount: int = Field(..., gt=0)
    customer_id: str | None = None
    customer: Customer
    order: CanonicalOrder
    payment_method: PaymentMethod | None = None
    payment_type: PaymentType | None = None
    metadata: dict[str, Any] | None = None

    def to_request_body(self) -> dict[str, Any]:
        """JSON-ready body using the processor's camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
