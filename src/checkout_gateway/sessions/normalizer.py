"""Normalize inbound session requests into the processor's client-session payload."""

import logging
from collections.abc import Callable

from checkout_gateway.core.identifiers import generate_order_id
from checkout_gateway.sessions.models import (
    DEFAULT_AMOUNT,
    DEFAULT_COUNTRY_CODE,
    DEFAULT_CURRENCY,
    PLACEHOLDER_EMAIL,
    ApplePayOptions,
    CanonicalOrder,
    CanonicalOrderPayload,
    Customer,
    LineItem,
    NativeSessionRequest,
    PaymentMethod,
    PaymentMethodOptions,
    PaymentSummaryItem,
    SessionRequest,
    SimplifiedSessionRequest,
)

logger = logging.getLogger(__name__)

OrderIdFactory = Callable[[], str]

DEFAULT_ITEM_ID = "hoodie-sku-1"
DEFAULT_ITEM_DESCRIPTION = "Premium Primer Hoodie"
NATIVE_ITEM_ID = "direct-api-item"
NATIVE_ITEM_DESCRIPTION = "Direct API Test Item"

FULL_CAPABILITIES = ["supports3DS", "supportsEMV", "supportsCredit", "supportsDebit"]
CREDIT_CAPABILITIES = ["supports3DS", "supportsEMV", "supportsCredit"]

# Checked in order; a later flag overrides an earlier one
APPLE_PAY_SCENARIOS = (
    ("apple_pay_recurring", FULL_CAPABILITIES, "Recurring Payment Setup", "final"),
    ("apple_pay_deferred", CREDIT_CAPABILITIES, "Buy Now, Pay Later", "pending"),
    ("apple_pay_auto_reload", FULL_CAPABILITIES, "Auto-reload Setup", "final"),
)


def normalize_session_request(
    request: SessionRequest,
    order_id_factory: OrderIdFactory = generate_order_id,
) -> CanonicalOrderPayload:
    """
    Build the processor client-session payload for either request shape.

    Args:
        request: A validated ``SimplifiedSessionRequest`` or ``NativeSessionRequest``
        order_id_factory: Generator for new order identifiers

    Returns:
        The canonical, immutable client-session payload
    """
    if isinstance(request, NativeSessionRequest):
        logger.info("Processing processor-native session request")
        return normalize_native(request, order_id_factory)

    logger.info("Processing simplified session request")
    return normalize_simplified(request, order_id_factory)


def normalize_native(
    request: NativeSessionRequest,
    order_id_factory: OrderIdFactory = generate_order_id,
) -> CanonicalOrderPayload:
    """Pass supplied fields through verbatim and synthesize missing customer/order."""
    amount = request.amount or DEFAULT_AMOUNT

    customer = request.customer or Customer(email_address=request.customer_email or PLACEHOLDER_EMAIL)

    if request.order is None:
        order = CanonicalOrder(
            country_code=request.country_code or DEFAULT_COUNTRY_CODE,
            line_items=[_default_line_item(NATIVE_ITEM_ID, NATIVE_ITEM_DESCRIPTION, amount)],
        )
    else:
        order_fields = request.order.model_dump(by_alias=True, exclude_none=True)
        if not request.order.line_items:
            order_fields["lineItems"] = [
                _default_line_item(NATIVE_ITEM_ID, NATIVE_ITEM_DESCRIPTION, amount)
            ]
        order = CanonicalOrder.model_validate(order_fields)

    return CanonicalOrderPayload(
        order_id=request.order_id or order_id_factory(),
        currency_code=request.currency_code or request.currency or DEFAULT_CURRENCY,
        amount=amount,
        customer_id=request.customer_id,
        customer=customer,
        order=order,
        payment_method=request.payment_method,
        payment_type=request.payment_type,
        metadata=request.metadata,
        **(request.model_extra or {}),
    )


def normalize_simplified(
    request: SimplifiedSessionRequest,
    order_id_factory: OrderIdFactory = generate_order_id,
) -> CanonicalOrderPayload:
    """Map storefront fields onto the processor format, always with a fresh order id."""
    amount = request.amount or DEFAULT_AMOUNT

    if request.items:
        line_items = [
            LineItem(
                item_id=item.id,
                description=item.name,
                amount=item.amount,
                quantity=item.quantity,
            )
            for item in request.items
        ]
    else:
        line_items = [_default_line_item(DEFAULT_ITEM_ID, DEFAULT_ITEM_DESCRIPTION, amount)]

    payment_method = PaymentMethod(
        # Vault only for returning customers so they can pay with a stored method later
        vault_on_success=bool(request.customer_id),
        first_payment_reason=request.first_payment_reason,
        options=PaymentMethodOptions(apple_pay=build_apple_pay_options(request, amount)),
    )

    return CanonicalOrderPayload(
        order_id=order_id_factory(),
        currency_code=request.currency,
        amount=amount,
        customer_id=request.customer_id,
        customer=Customer(email_address=request.customer_email or PLACEHOLDER_EMAIL),
        order=CanonicalOrder(country_code=request.country_code, line_items=line_items),
        payment_method=payment_method,
        payment_type=request.payment_type,
    )


def build_apple_pay_options(request: SimplifiedSessionRequest, amount: int) -> ApplePayOptions:
    """Apple Pay options; of the recurring, deferred and auto-reload flags the last set wins."""
    options = ApplePayOptions(merchant_display_name=request.apple_pay_merchant_name)

    for flag, capabilities, label, item_type in APPLE_PAY_SCENARIOS:
        if getattr(request, flag):
            options.merchant_capabilities = list(capabilities)
            options.payment_summary_items = [
                PaymentSummaryItem(label=label, amount=amount, type=item_type)
            ]

    return options


def _default_line_item(item_id: str, description: str, amount: int) -> LineItem:
    return LineItem(item_id=item_id, description=description, amount=amount, quantity=1)
