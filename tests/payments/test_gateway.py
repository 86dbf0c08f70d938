"""Tests for payout gateway port/adapter integration."""

import json

import httpx
import pytest
from payments.conversion import to_settlement_amount
from payments.gateway import get_gateway, reset_gateway, set_gateway
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.paypal_adapter import PayPalGateway
from payments.gateway.port import PayoutLinkResult
from pydantic import SecretStr
from shared.config import MarketplaceSettings, PayoutSettings, override_settings


def _link_request(gateway, key="payout-ord-1-grp-1"):
    return gateway.create_payout_link(
        amount=15.0,
        currency="USD",
        payee_name="Nimal Perera",
        payee_email="nimal@farm.lk",
        reference="ord-1:grp-1",
        idempotency_key=key,
    )


class TestConversion:
    def test_default_rate(self):
        assert to_settlement_amount(4500.0, PayoutSettings()) == 15.0

    def test_rounds_to_cents(self):
        assert to_settlement_amount(1000.0, PayoutSettings()) == 3.33

    def test_configured_rate(self):
        assert to_settlement_amount(1000.0, PayoutSettings(conversion_rate=250)) == 4.0


class TestFakeGateway:
    def test_default_link_succeeds(self):
        result = _link_request(FakeGateway())
        assert isinstance(result, PayoutLinkResult)
        assert result.success is True
        assert result.link_url.startswith("https://")
        assert result.gateway_reference is not None

    def test_configured_failure(self):
        gateway = FakeGateway()
        gateway.configure(should_succeed=False, failure_reason="Account limited")
        result = _link_request(gateway)
        assert result.success is False
        assert result.failure_reason == "Account limited"
        assert result.link_url is None

    def test_same_idempotency_key_returns_same_link(self):
        gateway = FakeGateway()
        first = _link_request(gateway)
        second = _link_request(gateway)
        assert first.link_url == second.link_url
        assert len(gateway.calls) == 2

    def test_different_keys_get_different_links(self):
        gateway = FakeGateway()
        assert _link_request(gateway, "k-1").link_url != _link_request(gateway, "k-2").link_url


class TestGatewayRegistry:
    def test_defaults_to_fake(self):
        assert isinstance(get_gateway(), FakeGateway)

    def test_set_gateway_overrides(self):
        custom = FakeGateway()
        set_gateway(custom)
        assert get_gateway() is custom

    def test_reset_restores_configured_gateway(self):
        custom = FakeGateway()
        set_gateway(custom)
        reset_gateway()
        assert get_gateway() is not custom

    def test_paypal_selected_by_settings(self):
        override_settings(MarketplaceSettings(payout=PayoutSettings(gateway="paypal")))
        assert isinstance(get_gateway(), PayPalGateway)

    def test_unknown_gateway_is_rejected(self):
        override_settings(MarketplaceSettings(payout=PayoutSettings(gateway="carrier-pigeon")))
        with pytest.raises(ValueError):
            get_gateway()


class TestPayPalGateway:
    @pytest.fixture()
    def settings(self):
        return PayoutSettings(
            gateway="paypal",
            paypal_client_id="client",
            paypal_client_secret=SecretStr("secret"),
        )

    def test_creates_checkout_order_and_returns_approve_link(self, settings):
        seen = {}

        def handler(request):
            if request.url.path == "/v1/oauth2/token":
                return httpx.Response(200, json={"access_token": "tok-123"})
            seen["headers"] = request.headers
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                201,
                json={
                    "id": "5O190127TN364715T",
                    "status": "CREATED",
                    "links": [
                        {"rel": "self", "href": "https://api.paypal.example/v2/checkout/orders/5O19"},
                        {"rel": "approve", "href": "https://www.paypal.example/checkoutnow?token=5O19"},
                    ],
                },
            )

        result = _link_request(PayPalGateway(settings, transport=httpx.MockTransport(handler)))

        assert result.success is True
        assert result.link_url == "https://www.paypal.example/checkoutnow?token=5O19"
        assert result.gateway_reference == "5O190127TN364715T"
        assert seen["headers"]["Authorization"] == "Bearer tok-123"
        assert seen["headers"]["PayPal-Request-Id"] == "payout-ord-1-grp-1"
        assert seen["body"]["intent"] == "CAPTURE"
        assert seen["body"]["purchase_units"][0]["amount"] == {"currency_code": "USD", "value": "15.00"}

    def test_rejected_request_is_unsuccessful(self, settings):
        def handler(request):
            if request.url.path == "/v1/oauth2/token":
                return httpx.Response(200, json={"access_token": "tok-123"})
            return httpx.Response(422, json={"name": "UNPROCESSABLE_ENTITY"})

        result = _link_request(PayPalGateway(settings, transport=httpx.MockTransport(handler)))
        assert result.success is False
        assert result.gateway_status == "422"

    def test_authentication_failure_is_unsuccessful(self, settings):
        gateway = PayPalGateway(settings, transport=httpx.MockTransport(lambda request: httpx.Response(401)))
        result = _link_request(gateway)
        assert result.success is False

    def test_missing_approve_link_is_unsuccessful(self, settings):
        def handler(request):
            if request.url.path == "/v1/oauth2/token":
                return httpx.Response(200, json={"access_token": "tok-123"})
            return httpx.Response(201, json={"id": "X", "status": "CREATED", "links": []})

        result = _link_request(PayPalGateway(settings, transport=httpx.MockTransport(handler)))
        assert result.success is False
        assert "approval link" in result.failure_reason

    def test_unreadable_reply_is_unsuccessful(self, settings):
        def handler(request):
            if request.url.path == "/v1/oauth2/token":
                return httpx.Response(200, json={"access_token": "tok-123"})
            return httpx.Response(201, text="<html>maintenance</html>")

        result = _link_request(PayPalGateway(settings, transport=httpx.MockTransport(handler)))
        assert result.success is False
        assert result.failure_reason == "Payout processor unavailable"
