"""Unit tests for session request normalization."""

import re

import pytest

from checkout_gateway.core.identifiers import generate_order_id
from checkout_gateway.sessions.models import SessionRequestAdapter
from checkout_gateway.sessions.normalizer import (
    CREDIT_CAPABILITIES,
    FULL_CAPABILITIES,
    normalize_session_request,
)


def fixed_order_id() -> str:
    return "ORD-1700000000000-ABCDEF12"


def normalize(payload: dict) -> dict:
    request = SessionRequestAdapter.validate_python(payload)
    return normalize_session_request(request, order_id_factory=fixed_order_id).to_request_body()


class TestOrderId:
    def test_format(self):
        assert re.fullmatch(r"ORD-\d{13}-[0-9A-F]{8}", generate_order_id())

    def test_unique(self):
        assert len({generate_order_id() for _ in range(100)}) == 100


class TestSimplifiedShape:
    """Tests for the simplified storefront shape."""

    def test_amount_and_currency_only(self):
        body = normalize({"amount": 1000, "currency": "GBP"})

        assert body["orderId"] == fixed_order_id()
        assert body["currencyCode"] == "GBP"
        assert body["amount"] == 1000
        assert body["customer"] == {"emailAddress": "demo@example.com"}
        assert body["order"] == {
            "countryCode": "GB",
            "lineItems": [
                {
                    "itemId": "hoodie-sku-1",
                    "description": "Premium Primer Hoodie",
                    "amount": 1000,
                    "quantity": 1,
                }
            ],
        }
        assert body["paymentMethod"] == {"vaultOnSuccess": False, "options": {"APPLE_PAY": {}}}
        assert "customerId" not in body
        assert "paymentType" not in body

    def test_empty_request_uses_defaults(self):
        body = normalize({})

        assert body["amount"] == 4999
        assert body["currencyCode"] == "GBP"
        assert body["order"]["lineItems"][0]["amount"] == 4999

    @pytest.mark.parametrize("amount", [1, 250, 4999, 9_999_999])
    def test_synthesized_line_item_equals_total(self, amount):
        body = normalize({"amount": amount})

        line_items = body["order"]["lineItems"]
        assert len(line_items) == 1
        assert sum(item["amount"] * item["quantity"] for item in line_items) == amount

    def test_items_mapped_to_line_items(self):
        body = normalize(
            {
                "amount": 3500,
                "items": [
                    {"id": "sku-1", "name": "Mug", "amount": 1500, "quantity": 1},
                    {"id": "sku-2", "name": "Sticker", "amount": 1000, "quantity": 2},
                ],
            }
        )

        assert body["order"]["lineItems"] == [
            {"itemId": "sku-1", "description": "Mug", "amount": 1500, "quantity": 1},
            {"itemId": "sku-2", "description": "Sticker", "amount": 1000, "quantity": 2},
        ]

    def test_order_id_always_generated(self):
        """A caller-supplied id is never used for the simplified shape."""
        request = SessionRequestAdapter.validate_python({"amount": 100})
        first = normalize_session_request(request).order_id
        second = normalize_session_request(request).order_id

        assert first != second

    def test_customer_email_and_country(self):
        body = normalize({"customerEmail": "jane@example.com", "countryCode": "us"})

        assert body["customer"] == {"emailAddress": "jane@example.com"}
        assert body["order"]["countryCode"] == "US"

    def test_customer_id_enables_vaulting(self):
        body = normalize({"customerId": "cust-42", "amount": 100})

        assert body["customerId"] == "cust-42"
        assert body["paymentMethod"]["vaultOnSuccess"] is True

    def test_recurring_fields(self):
        body = normalize(
            {
                "customerId": "cust-42",
                "paymentType": "FIRST_PAYMENT",
                "firstPaymentReason": "Recurring",
            }
        )

        assert body["paymentType"] == "FIRST_PAYMENT"
        assert body["paymentMethod"]["firstPaymentReason"] == "Recurring"

    def test_apple_pay_merchant_name(self):
        body = normalize({"applePayMerchantName": "Hoodie Shop"})

        assert body["paymentMethod"]["options"]["APPLE_PAY"] == {
            "merchantDisplayName": "Hoodie Shop"
        }

    def test_apple_pay_recurring(self):
        body = normalize({"amount": 999, "applePayRecurring": True})

        apple_pay = body["paymentMethod"]["options"]["APPLE_PAY"]
        assert apple_pay["merchantCapabilities"] == FULL_CAPABILITIES
        assert apple_pay["paymentSummaryItems"] == [
            {"label": "Recurring Payment Setup", "amount": 999, "type": "final"}
        ]

    def test_apple_pay_deferred(self):
        body = normalize({"amount": 999, "applePayDeferred": True})

        apple_pay = body["paymentMethod"]["options"]["APPLE_PAY"]
        assert apple_pay["merchantCapabilities"] == CREDIT_CAPABILITIES
        assert apple_pay["paymentSummaryItems"] == [
            {"label": "Buy Now, Pay Later", "amount": 999, "type": "pending"}
        ]

    def test_apple_pay_later_flag_overrides_earlier(self):
        body = normalize({"applePayRecurring": True, "applePayDeferred": True})
        summary = body["paymentMethod"]["options"]["APPLE_PAY"]["paymentSummaryItems"]
        assert summary[0]["label"] == "Buy Now, Pay Later"

        body = normalize(
            {"applePayRecurring": True, "applePayDeferred": True, "applePayAutoReload": True}
        )
        apple_pay = body["paymentMethod"]["options"]["APPLE_PAY"]
        assert apple_pay["merchantCapabilities"] == FULL_CAPABILITIES
        assert apple_pay["paymentSummaryItems"] == [
            {"label": "Auto-reload Setup", "amount": 4999, "type": "final"}
        ]

    def test_normalization_is_deterministic(self):
        payload = {
            "amount": 2000,
            "currency": "EUR",
            "customerEmail": "jane@example.com",
            "items": [{"id": "sku-1", "name": "Mug", "amount": 2000, "quantity": 1}],
            "applePayDeferred": True,
        }
        assert normalize(payload) == normalize(payload)


class TestNativeShape:
    """Tests for the processor-native pass-through shape."""

    @pytest.fixture
    def native_payload(self) -> dict:
        return {
            "orderId": "ORD-CUSTOM-1",
            "currencyCode": "EUR",
            "amount": 2500,
            "customerId": "cust-7",
            "customer": {"emailAddress": "jane@example.com", "mobileNumber": "+447700900000"},
            "order": {
                "countryCode": "FR",
                "lineItems": [
                    {"itemId": "sku-1", "description": "Mug", "amount": 2500, "quantity": 1}
                ],
            },
            "paymentMethod": {"vaultOnSuccess": True, "firstPaymentReason": "CardOnFile"},
            "paymentType": "FIRST_PAYMENT",
            "metadata": {"source": "tests", "attempt": 1},
        }

    def test_supplied_fields_pass_through_unchanged(self, native_payload):
        body = normalize(native_payload)

        for key, value in native_payload.items():
            assert body[key] == value

    def test_unknown_fields_pass_through(self, native_payload):
        native_payload["riskData"] = {"fraudChecks": {"source": "WEB"}}

        body = normalize(native_payload)

        assert body["riskData"] == {"fraudChecks": {"source": "WEB"}}

    def test_simplified_only_fields_not_forwarded(self):
        body = normalize({"orderId": "ORD-1", "userId": "u-1", "customerEmail": "a@example.com"})

        assert "userId" not in body
        assert "customerEmail" not in body

    def test_missing_order_id_generated(self):
        body = normalize({"currencyCode": "USD", "amount": 100})

        assert body["orderId"] == fixed_order_id()

    def test_defaults_when_only_order_id(self):
        body = normalize({"orderId": "ORD-1"})

        assert body["currencyCode"] == "GBP"
        assert body["amount"] == 4999
        assert body["customer"] == {"emailAddress": "demo@example.com"}
        assert body["order"] == {
            "countryCode": "GB",
            "lineItems": [
                {
                    "itemId": "direct-api-item",
                    "description": "Direct API Test Item",
                    "amount": 4999,
                    "quantity": 1,
                }
            ],
        }
        assert "paymentMethod" not in body

    def test_currency_falls_back_to_simplified_field(self):
        body = normalize({"orderId": "ORD-1", "currency": "JPY"})

        assert body["currencyCode"] == "JPY"

    def test_customer_synthesized_from_email(self):
        body = normalize({"orderId": "ORD-1", "customerEmail": "jane@example.com"})

        assert body["customer"] == {"emailAddress": "jane@example.com"}

    def test_order_synthesized_with_country_code(self):
        body = normalize({"orderId": "ORD-1", "amount": 700, "countryCode": "DE"})

        assert body["order"]["countryCode"] == "DE"
        assert body["order"]["lineItems"][0]["amount"] == 700

    def test_order_without_line_items_gets_default_item(self):
        body = normalize({"order": {"countryCode": "FR"}, "amount": 300})

        assert body["order"]["countryCode"] == "FR"
        assert body["order"]["lineItems"] == [
            {
                "itemId": "direct-api-item",
                "description": "Direct API Test Item",
                "amount": 300,
                "quantity": 1,
            }
        ]

    def test_payload_is_immutable(self, native_payload):
        from pydantic import ValidationError

        request = SessionRequestAdapter.validate_python(native_payload)
        payload = normalize_session_request(request)

        with pytest.raises(ValidationError):
            payload.amount = 1
