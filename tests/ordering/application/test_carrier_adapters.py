"""Tests for carrier addresses and the ShipEngine adapter."""

import json

import httpx
import pytest
from ordering.carrier import get_carrier, reset_carrier, set_carrier
from ordering.carrier.addresses import carrier_name, to_shipment_address
from ordering.carrier.fake_adapter import FakeCarrier
from ordering.carrier.port import CustomsItem, ShipmentAddress, ShipmentRequest
from ordering.carrier.shipengine_adapter import ShipEngineCarrier
from pydantic import SecretStr
from shared.config import CarrierSettings, MarketplaceSettings, override_settings


def _address(name, city):
    return ShipmentAddress(
        name=name,
        address_line1="1 Main Street",
        city_locality=city,
        postal_code="00000",
        country_code="LK",
        phone="0000000000",
        email="someone@example.lk",
    )


@pytest.fixture()
def request_():
    return ShipmentRequest(
        reference="ord-1:grp-1",
        ship_from=_address("Nimal Perera", "Kurunegala"),
        ship_to=_address("Green Grocers", "Colombo"),
        weight_kg=1.0,
        customs_items=(CustomsItem(description="Samba Rice", quantity=5, value_amount=1000.0, value_currency="LKR"),),
    )


@pytest.fixture()
def settings():
    return CarrierSettings(adapter="shipengine", api_key=SecretStr("se-key"))


class TestCarrierAddresses:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Nimal Perera", "Nimal Perera"),
            ("  Nimal   Perera ", "Nimal Perera"),
            ("Madhu", "Default Full Name"),
            ("", "Default Full Name"),
            (None, "Default Full Name"),
        ],
    )
    def test_carrier_name(self, name, expected):
        assert carrier_name(name, CarrierSettings()) == expected

    def test_missing_address_falls_back_to_city(self):
        class Party:
            name = "Sara Fernando"
            email = "sara@farm.lk"
            address = ""
            city = "Nuwara Eliya"

        address = to_shipment_address(Party(), CarrierSettings())
        assert address.address_line1 == "Nuwara Eliya"
        assert address.country_code == "LK"


class TestShipEngineCarrier:
    def test_successful_shipment(self, settings, request_):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["api_key"] = request.headers["API-Key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "has_errors": False,
                    "shipments": [
                        {
                            "shipment_id": "se-28529731",
                            "tracking_number": "9400111899560334462930",
                            "label_download": {"pdf": "https://api.shipengine.example/label.pdf"},
                        }
                    ],
                },
            )

        result = ShipEngineCarrier(settings, transport=httpx.MockTransport(handler)).create_shipment(request_)

        assert result == {
            "shipment_id": "se-28529731",
            "tracking_number": "9400111899560334462930",
            "label_url": "https://api.shipengine.example/label.pdf",
        }
        assert seen["path"].endswith("/shipments")
        assert seen["api_key"] == "se-key"
        shipment = seen["body"]["shipments"][0]
        assert shipment["carrier_id"] == settings.carrier_id
        assert shipment["external_shipment_id"] == "ord-1:grp-1"
        assert shipment["ship_from"]["city_locality"] == "Kurunegala"
        assert shipment["customs"]["customs_items"][0]["value"] == {"currency": "LKR", "amount": 1000.0}

    def test_error_payload_is_reported(self, settings, request_):
        def handler(request):
            return httpx.Response(
                200,
                json={"has_errors": True, "shipments": [{"errors": [{"message": "Invalid postal code"}]}]},
            )

        result = ShipEngineCarrier(settings, transport=httpx.MockTransport(handler)).create_shipment(request_)
        assert result["shipment_id"] is None
        assert result["error"] == "Invalid postal code"

    def test_http_error_is_reported(self, settings, request_):
        carrier = ShipEngineCarrier(settings, transport=httpx.MockTransport(lambda r: httpx.Response(500, text="boom")))
        result = carrier.create_shipment(request_)
        assert result["shipment_id"] is None
        assert result["error"] == "boom"

    def test_transport_error_is_reported(self, settings, request_):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        result = ShipEngineCarrier(settings, transport=httpx.MockTransport(handler)).create_shipment(request_)
        assert result["shipment_id"] is None
        assert "timed out" in result["error"]

    def test_unreadable_reply_is_reported(self, settings, request_):
        transport = httpx.MockTransport(lambda r: httpx.Response(200, text="<html>gateway</html>"))
        result = ShipEngineCarrier(settings, transport=transport).create_shipment(request_)
        assert result["shipment_id"] is None
        assert result["error"] == "Unreadable carrier reply"


class TestCarrierRegistry:
    def test_defaults_to_fake(self):
        assert isinstance(get_carrier(), FakeCarrier)

    def test_shipengine_selected_by_settings(self):
        override_settings(MarketplaceSettings(carrier=CarrierSettings(adapter="shipengine")))
        assert isinstance(get_carrier(), ShipEngineCarrier)

    def test_set_and_reset(self):
        custom = FakeCarrier()
        set_carrier(custom)
        assert get_carrier() is custom
        reset_carrier()
        assert get_carrier() is not custom
