"""Client-session router for FastAPI."""

import logging

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from checkout_gateway.config import Settings, get_settings
from checkout_gateway.core.base_models import ClientSessionResponse, error_response
from checkout_gateway.core.exceptions import (
    ConfigurationError,
    RequestValidationFailed,
    UpstreamError,
)
from checkout_gateway.core.validation import format_validation_errors, read_json_object
from checkout_gateway.processor.client import ProcessorClient
from checkout_gateway.processor.dependencies import get_processor_client
from checkout_gateway.sessions.models import SessionRequestAdapter
from checkout_gateway.sessions.normalizer import normalize_session_request

logger = logging.getLogger(__name__)

router = APIRouter()

SESSION_TAGS = ("simplified", "native")


@router.post("/create-client-session", response_model=ClientSessionResponse)
async def create_client_session(
    request: Request,
    settings: Settings = Depends(get_settings),
    processor: ProcessorClient = Depends(get_processor_client),
):
    """
    Create a processor client session and return its client token.

    Accepts either the simplified storefront shape or the processor's native
    client-session shape; both are normalized into one payload before the
    (retried) outbound call.
    """
    try:
        processor.ensure_configured()

        body = await read_json_object(request)
        try:
            session_request = SessionRequestAdapter.validate_python(body)
        except ValidationError as e:
            raise RequestValidationFailed(
                details=format_validation_errors(e, skip_locs=SESSION_TAGS)
            ) from e

        payload = normalize_session_request(session_request)
        response = await processor.create_client_session(payload)

    except (ConfigurationError, UpstreamError) as e:
        logger.error("Failed to create client session: %s", e.message)
        debug = None
        if isinstance(e, UpstreamError) and e.detail and not settings.is_production:
            debug = e.detail
        return error_response(
            e.status_code,
            "Failed to create client session",
            message=e.message,
            debug=debug,
        )

    logger.info("Client session created successfully for order %s", payload.order_id)

    return ClientSessionResponse(
        client_token=response.get("clientToken"),
        order_id=payload.order_id,
        amount=payload.amount,
        currency=payload.currency_code,
        expires_at=response.get("expiresAt"),
    )
