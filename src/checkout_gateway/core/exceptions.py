"""Custom exceptions for the checkout gateway."""

from typing import Any


class CheckoutGatewayError(Exception):
    """Base exception for checkout gateway errors."""

    status_code: int = 500

    def __init__(self, message: str = "Checkout gateway error"):
        self.message = message
        super().__init__(self.message)


class RequestValidationFailed(CheckoutGatewayError):
    """Raised when an inbound payload fails schema constraints."""

    status_code = 400

    def __init__(self, message: str = "Invalid request data", details: list[str] | None = None):
        self.details = details or []
        super().__init__(message)


class ConfigurationError(CheckoutGatewayError):
    """Raised when the server-held processor secret is missing or a placeholder."""

    def __init__(
        self,
        message: str = "Primer API Key not configured. Please check your environment variables.",
    ):
        super().__init__(message)


class UpstreamError(CheckoutGatewayError):
    """Raised when the processor responds with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: dict[str, Any] | None = None,
    ):
        self.upstream_status = status_code
        self.detail = detail or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    @property
    def is_client_error(self) -> bool:
        return self.upstream_status is not None and 400 <= self.upstream_status < 500


class TransportError(UpstreamError):
    """Raised on network failure or timeout talking to the processor."""

    def __init__(self, message: str):
        super().__init__(message, status_code=None)


class SignatureVerificationError(CheckoutGatewayError):
    """Raised when webhook signature verification fails."""

    status_code = 401

    def __init__(self, message: str = "Invalid signature"):
        super().__init__(message)


class MalformedPayloadError(CheckoutGatewayError):
    """Raised when a webhook body is not valid JSON."""

    status_code = 400

    def __init__(self, message: str = "Malformed webhook payload"):
        super().__init__(message)
