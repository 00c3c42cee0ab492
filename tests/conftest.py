"""Pytest fixtures for checkout gateway tests."""

import hashlib
import hmac
import json
from collections.abc import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from checkout_gateway.config import Settings
from checkout_gateway.main import create_app
from checkout_gateway.processor.client import ProcessorClient
from checkout_gateway.processor.dependencies import get_processor_client

MockHandler = Callable[[httpx.Request], httpx.Response]


class RecordingSleep:
    """Stand-in for asyncio.sleep that records delays instead of waiting."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def webhook_secret() -> str:
    """Test webhook signing secret."""
    return "whsec_test_secret_12345"


@pytest.fixture
def test_settings(webhook_secret) -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        processor_api_url="https://api.processor.test",
        primer_api_key="sk_test_valid_key_123",
        primer_webhook_secret=webhook_secret,
        verify_webhooks=True,
        environment="development",
        retry_max_attempts=3,
        retry_base_delay=1.0,
    )


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def sign() -> Callable[[bytes, str], str]:
    """Compute the hex HMAC-SHA256 signature the processor would send."""

    def _sign(payload: bytes, secret: str) -> str:
        return hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()

    return _sign


@pytest.fixture
def make_processor_client(test_settings, recording_sleep):
    """Build a ProcessorClient whose HTTP calls go to a mock handler."""

    def _make(handler: MockHandler, settings: Settings | None = None) -> ProcessorClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return ProcessorClient(
            settings or test_settings,
            http_client=http_client,
            sleep=recording_sleep,
        )

    return _make


@pytest.fixture
def make_client(test_settings, make_processor_client):
    """TestClient for the server app with the processor replaced by a mock handler."""

    def _make(handler: MockHandler | None = None, settings: Settings | None = None) -> TestClient:
        settings = settings or test_settings
        app = create_app(settings)
        if handler is not None:
            processor = make_processor_client(handler, settings)
            app.dependency_overrides[get_processor_client] = lambda: processor
        return TestClient(app)

    return _make


@pytest.fixture
def authorized_event() -> dict:
    """A PAYMENT_AUTHORIZED webhook payload."""
    return {
        "eventType": "PAYMENT_AUTHORIZED",
        "data": {
            "payment": {
                "id": "pay_1",
                "orderId": "ORD-1",
                "amount": 500,
                "currencyCode": "GBP",
                "status": "AUTHORIZED",
            }
        },
    }


@pytest.fixture
def authorized_event_body(authorized_event) -> bytes:
    return json.dumps(authorized_event).encode("utf-8")


@pytest.fixture
def session_created_response() -> dict:
    """Processor response to a successful client-session request."""
    return {
        "clientToken": "tok_abc",
        "expiresAt": "2024-01-01T00:00:00Z",
    }


@pytest.fixture
def payment_response() -> dict:
    """Processor payment object."""
    return {
        "id": "pay_123",
        "orderId": "ORD-1700000000000-ABCDEF12",
        "status": "AUTHORIZED",
        "amount": 1500,
        "currencyCode": "GBP",
        "paymentMethod": {"paymentType": "SUBSCRIPTION"},
    }
