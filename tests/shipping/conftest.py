import pytest
from shared.config import ShippingSettings
from shipping.geo.fake_adapter import FakeGeoAdapter


@pytest.fixture()
def geo():
    """Fake geo service for a handful of Sri Lankan cities, distances by road."""
    adapter = FakeGeoAdapter()
    adapter.add_city("Colombo", 6.9271, 79.8612)
    adapter.add_city("Kandy", 7.2906, 80.6337)
    adapter.add_city("Negombo", 7.2008, 79.8737)
    adapter.add_city("Galle", 6.0535, 80.2210)
    adapter.add_city("Jaffna", 9.6615, 80.0255)
    adapter.set_distance("Kandy", "Colombo", 94.0)
    adapter.set_distance("Negombo", "Colombo", 37.5)
    adapter.set_distance("Galle", "Colombo", 126.0)
    adapter.set_distance("Jaffna", "Colombo", 395.0)
    return adapter


@pytest.fixture()
def shipping_settings():
    return ShippingSettings(lookup_timeout_seconds=0.5)
