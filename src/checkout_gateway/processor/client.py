"""HTTP client for the payment processor's session and payments APIs."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any
from urllib.parse import quote

import httpx

from checkout_gateway import __version__
from checkout_gateway.config import Settings
from checkout_gateway.core.exceptions import ConfigurationError, TransportError, UpstreamError
from checkout_gateway.core.identifiers import generate_idempotency_key
from checkout_gateway.core.retry import RetryPolicy, retry_with_backoff
from checkout_gateway.sessions.models import CanonicalOrderPayload

logger = logging.getLogger(__name__)

USER_AGENT = f"CheckoutGateway/{__version__}"
INVALID_RESPONSE_MESSAGE = "Invalid processor response"


class ProcessorClient:
    """
    Thin wrapper over ``httpx.AsyncClient`` for the processor's REST API.

    Session creation and token charges go through ``retry_with_backoff``;
    payment lookups fail fast. Use as an async context manager, or pass in an
    existing ``httpx.AsyncClient`` (e.g. one built on ``httpx.MockTransport``).
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings
        self._sleep = sleep
        self.retry_policy = retry_policy or RetryPolicy(
            max_attempts=settings.retry_max_attempts,
            base_delay=settings.retry_base_delay,
        )
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=settings.processor_timeout)

    async def __aenter__(self) -> "ProcessorClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def ensure_configured(self) -> None:
        """Raise ConfigurationError when the API key is missing or a placeholder."""
        if not self.settings.api_key_configured:
            raise ConfigurationError()

    def _headers(self, idempotency_key: str | None = None) -> dict[str, str]:
        headers = {
            "X-API-KEY": self.settings.primer_api_key,
            "X-API-VERSION": self.settings.processor_api_version,
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        if idempotency_key:
            headers["X-Idempotency-Key"] = idempotency_key
        return headers

    def _is_retryable(self, error: Exception) -> bool:
        if isinstance(error, UpstreamError) and error.is_client_error:
            return self.settings.retry_client_errors
        return True

    async def _request(
        self,
        method: str,
        url: str,
        *,
        json: dict[str, Any] | None = None,
        headers: dict[str, str],
        failure_message: str,
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(method, url, json=json, headers=headers)
        except httpx.TimeoutException as e:
            raise TransportError(f"Timed out calling {url}: {e}") from e
        except httpx.TransportError as e:
            raise TransportError(f"Could not reach {url}: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.is_success:
            if isinstance(data, dict):
                detail = data
            else:
                detail = {} if data is None else {"body": data}
            logger.error(
                "Processor API error: %s %s -> %d %s",
                method,
                url,
                response.status_code,
                detail,
            )
            raise UpstreamError(
                detail.get("message") or f"{failure_message}: {response.status_code}",
                status_code=response.status_code,
                detail=detail,
            )

        if not isinstance(data, dict):
            # A 2xx without a JSON object body counts as a failed attempt
            logger.error(
                "Processor API returned %d without a JSON object: %s %s",
                response.status_code,
                method,
                url,
            )
            raise UpstreamError(
                INVALID_RESPONSE_MESSAGE,
                status_code=502,
                detail={"upstreamStatus": response.status_code, "body": response.text[:200]},
            )

        return data

    async def create_client_session(self, payload: CanonicalOrderPayload) -> dict[str, Any]:
        """POST the canonical payload to the client-session API, with retries."""
        self.ensure_configured()
        body = payload.to_request_body()

        async def attempt() -> dict[str, Any]:
            return await self._request(
                "POST",
                self.settings.client_session_url,
                json=body,
                headers=self._headers(),
                failure_message="Primer API request failed",
            )

        return await retry_with_backoff(
            attempt, self.retry_policy, retry_on=self._is_retryable, sleep=self._sleep
        )

    async def charge_payment_method(self, body: dict[str, Any]) -> dict[str, Any]:
        """
        POST a payment for a vaulted payment-method token, with retries.

        One idempotency key is generated per charge and reused by every retry
        so the processor collapses duplicate attempts into a single payment.
        """
        self.ensure_configured()
        idempotency_key = generate_idempotency_key()

        async def attempt() -> dict[str, Any]:
            return await self._request(
                "POST",
                self.settings.payments_url,
                json=body,
                headers=self._headers(idempotency_key=idempotency_key),
                failure_message="Primer Payments API request failed",
            )

        return await retry_with_backoff(
            attempt, self.retry_policy, retry_on=self._is_retryable, sleep=self._sleep
        )

    async def get_payment(self, payment_id: str) -> dict[str, Any]:
        """GET a payment by id; not retried."""
        self.ensure_configured()
        return await self._request(
            "GET",
            f"{self.settings.payments_url}/{quote(payment_id, safe='')}",
            headers=self._headers(),
            failure_message="Failed to get payment status",
        )
