"""Processor webhook verification and dispatch."""

from checkout_gateway.webhooks.dispatcher import WebhookDispatcher
from checkout_gateway.webhooks.models import WebhookEvent, WebhookEventType
from checkout_gateway.webhooks.validator import compute_signature, verify_webhook_signature

__all__ = [
    "WebhookDispatcher",
    "WebhookEvent",
    "WebhookEventType",
    "compute_signature",
    "verify_webhook_signature",
]
