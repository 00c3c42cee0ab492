"""Payment charge and status router for FastAPI."""

import logging

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from checkout_gateway.config import Settings, get_settings
from checkout_gateway.core.base_models import ChargeResponse, error_response
from checkout_gateway.core.exceptions import (
    ConfigurationError,
    RequestValidationFailed,
    TransportError,
    UpstreamError,
)
from checkout_gateway.core.validation import format_validation_errors, read_json_object
from checkout_gateway.payments.models import ChargeRequest
from checkout_gateway.processor.client import ProcessorClient
from checkout_gateway.processor.dependencies import get_processor_client

logger = logging.getLogger(__name__)

router = APIRouter()


def describe_charge_failure(error: UpstreamError) -> str:
    if isinstance(error, TransportError):
        return f"Payment processing error: {error.message}"
    return f"Primer Payments API request failed: {error.upstream_status}"


@router.post("/charge-payment-method", response_model=ChargeResponse)
async def charge_payment_method(
    request: Request,
    settings: Settings = Depends(get_settings),
    processor: ProcessorClient = Depends(get_processor_client),
):
    """Charge a previously vaulted payment-method token (merchant-initiated payment)."""
    try:
        processor.ensure_configured()
    except ConfigurationError as e:
        return error_response(500, e.message)

    body = await read_json_object(request)
    try:
        charge = ChargeRequest.model_validate(body)
    except ValidationError as e:
        raise RequestValidationFailed(details=format_validation_errors(e)) from e

    logger.info(
        "Processing payment method token charge: token=%s amount=%d currency=%s payment_type=%s",
        charge.masked_token,
        charge.amount,
        charge.currency_code,
        charge.payment_type.value if charge.payment_type else None,
    )

    try:
        payment = await processor.charge_payment_method(charge.to_payment_request())
    except UpstreamError as e:
        logger.error("Payment method token charge failed: %s", e.message)
        return error_response(
            500,
            describe_charge_failure(e),
            debug=None if settings.is_production else e.message,
        )

    status = str(payment.get("status") or "processed")
    logger.info(
        "Payment processed successfully: payment_id=%s status=%s",
        payment.get("id"),
        status,
    )

    return ChargeResponse(
        payment=payment,
        message=f"Payment {status.lower()} successfully",
    )


@router.get("/payments/{payment_id}")
async def get_payment_status(
    payment_id: str,
    settings: Settings = Depends(get_settings),
    processor: ProcessorClient = Depends(get_processor_client),
):
    """Return the processor's payment object as-is."""
    try:
        processor.ensure_configured()
    except ConfigurationError as e:
        return error_response(500, e.message)

    if not payment_id.strip():
        return error_response(400, "Payment ID is required")

    logger.info("Fetching payment status for %s", payment_id)

    try:
        payment = await processor.get_payment(payment_id)
    except TransportError as e:
        logger.error("Payment status check failed: %s", e.message)
        return error_response(500, "Internal server error", message=e.message)
    except UpstreamError as e:
        return error_response(
            e.status_code,
            e.message or "Failed to get payment status",
            details=None if settings.is_production else e.detail,
        )

    logger.info("Payment status retrieved for %s", payment_id)
    return payment
