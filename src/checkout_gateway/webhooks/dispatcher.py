"""Route verified webhook events to their fulfillment handlers."""

import inspect
import logging
from collections.abc import Awaitable, Callable

from checkout_gateway.core.base_models import WebhookAck
from checkout_gateway.webhooks.models import WebhookEvent, WebhookEventType, WebhookPayment

logger = logging.getLogger(__name__)

EventHandler = Callable[[WebhookPayment], Awaitable[None] | None]


def handle_payment_created(payment: WebhookPayment) -> None:
    """Extension point: record the payment and link it to its order."""
    logger.info(
        "Payment created: id=%s order_id=%s amount=%s currency=%s status=%s",
        payment.id,
        payment.order_id,
        payment.amount,
        payment.currency_code,
        payment.status,
    )


def handle_payment_authorized(payment: WebhookPayment) -> None:
    """Extension point: reserve inventory, confirm the order, start fulfillment."""
    logger.info(
        "Payment authorized: id=%s order_id=%s amount=%s currency=%s method=%s",
        payment.id,
        payment.order_id,
        payment.amount,
        payment.currency_code,
        payment.payment_method_type,
    )
    logger.info("Order fulfillment triggered for payment %s", payment.id)


def handle_payment_captured(payment: WebhookPayment) -> None:
    """Extension point: mark the order paid, ship, update accounting."""
    logger.info(
        "Payment captured: id=%s order_id=%s amount=%s currency=%s",
        payment.id,
        payment.order_id,
        payment.amount,
        payment.currency_code,
    )
    logger.info("Payment capture completed for order %s", payment.order_id)


def handle_payment_failed(payment: WebhookPayment) -> None:
    """Extension point: release inventory and offer the customer another method."""
    logger.info(
        "Payment failed: id=%s order_id=%s reason=%s status=%s",
        payment.id,
        payment.order_id,
        payment.failure_reason,
        payment.status,
    )
    logger.info("Payment failure handling initiated for order %s", payment.order_id)


def handle_payment_cancelled(payment: WebhookPayment) -> None:
    """Extension point: cancel the order and release inventory."""
    logger.info(
        "Payment cancelled: id=%s order_id=%s status=%s",
        payment.id,
        payment.order_id,
        payment.status,
    )


DEFAULT_HANDLERS: dict[WebhookEventType, EventHandler] = {
    WebhookEventType.PAYMENT_CREATED: handle_payment_created,
    WebhookEventType.PAYMENT_AUTHORIZED: handle_payment_authorized,
    WebhookEventType.PAYMENT_CAPTURED: handle_payment_captured,
    WebhookEventType.PAYMENT_FAILED: handle_payment_failed,
    WebhookEventType.PAYMENT_CANCELLED: handle_payment_cancelled,
}


class WebhookDispatcher:
    """
    Maps each event type to one handler and always acknowledges.

    Handler failures are logged and swallowed: a non-2xx response would make
    the processor redeliver the event, which this service cannot control.
    """

    def __init__(self, handlers: dict[WebhookEventType, EventHandler] | None = None):
        self._handlers: dict[WebhookEventType, EventHandler] = dict(DEFAULT_HANDLERS)
        if handlers:
            self._handlers.update(handlers)

    def register(self, event_type: WebhookEventType, handler: EventHandler) -> None:
        """Replace the handler for ``event_type``."""
        self._handlers[event_type] = handler

    def handler_for(self, event_type: WebhookEventType) -> EventHandler:
        return self._handlers[event_type]

    async def dispatch(self, event: WebhookEvent) -> WebhookAck:
        payment = event.payment
        logger.info(
            "Processing webhook %s: payment_id=%s status=%s amount=%s currency=%s",
            event.event_type,
            event.payment_id,
            payment.status if payment else None,
            payment.amount if payment else None,
            payment.currency_code if payment else None,
        )

        event_type = event.known_type
        if event_type is None:
            logger.info("Unhandled webhook event type: %s", event.event_type)
        else:
            await self._run_handler(event_type, payment or WebhookPayment())

        return WebhookAck(event_type=event.event_type, payment_id=event.payment_id)

    async def _run_handler(self, event_type: WebhookEventType, payment: WebhookPayment) -> None:
        handler = self._handlers[event_type]
        try:
            result = handler(payment)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(
                "Webhook handler for %s failed for payment %s: %s",
                event_type.value,
                payment.id,
                str(e),
                exc_info=True,
            )
