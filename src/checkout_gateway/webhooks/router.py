"""Webhook router for FastAPI."""

import json
import logging

from fastapi import APIRouter, Depends, Header, Request

from checkout_gateway.config import Settings, get_settings
from checkout_gateway.core.base_models import WebhookAck
from checkout_gateway.core.exceptions import MalformedPayloadError, SignatureVerificationError
from checkout_gateway.webhooks.dispatcher import WebhookDispatcher
from checkout_gateway.webhooks.models import WebhookEvent
from checkout_gateway.webhooks.validator import SIGNATURE_HEADER, verify_webhook_signature

logger = logging.getLogger(__name__)

router = APIRouter()


def get_dispatcher(request: Request) -> WebhookDispatcher:
    """Dispatcher built at startup, or the default handlers."""
    dispatcher = getattr(request.app.state, "webhook_dispatcher", None)
    return dispatcher or WebhookDispatcher()


@router.post("/webhook", response_model=WebhookAck)
async def receive_webhook(
    request: Request,
    settings: Settings = Depends(get_settings),
    dispatcher: WebhookDispatcher = Depends(get_dispatcher),
    signature: str | None = Header(default=None, alias=SIGNATURE_HEADER),
) -> WebhookAck:
    """
    Receive and acknowledge processor webhook notifications.

    This endpoint:
    1. Verifies the HMAC-SHA256 signature over the raw body (401 on mismatch)
    2. Parses the JSON body (400 if malformed)
    3. Dispatches the event to its handler
    4. Always acknowledges with 200 once steps 1 and 2 pass
    """
    # Read raw body (needed for signature verification)
    raw_body = await request.body()
    logger.info("Received webhook request (%d bytes)", len(raw_body))

    if settings.verify_webhooks and not verify_webhook_signature(
        raw_body, signature, settings.primer_webhook_secret
    ):
        logger.warning("Invalid webhook signature")
        raise SignatureVerificationError("Invalid signature")

    try:
        payload = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Invalid JSON webhook payload: %s", str(e))
        raise MalformedPayloadError(f"Invalid JSON: {e}") from e

    if not isinstance(payload, dict):
        logger.warning("Webhook payload is %s, not an object", type(payload).__name__)
        raise MalformedPayloadError("Webhook payload must be a JSON object")

    event = WebhookEvent.model_validate(payload)
    return await dispatcher.dispatch(event)
