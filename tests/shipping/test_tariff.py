"""Tests for the distance tariff and per-leg pricing."""

import pytest
from pydantic import ValidationError as SettingsValidationError
from shared.config import RateTier, ShippingTariff
from shipping.rates import ShippingLine, group_origins, normalize_city, price_quote


@pytest.fixture()
def tariff():
    return ShippingTariff()


class TestPriceForDistance:
    @pytest.mark.parametrize(
        "distance_km, price",
        [
            (0.0, 350.0),
            (12.4, 350.0),
            (49.99, 350.0),
            (50.0, 350.0),
            (50.01, 700.0),
            (100.0, 700.0),
            (100.01, 1200.0),
            (395.0, 1200.0),
        ],
    )
    def test_tier_bounds_are_inclusive(self, tariff, distance_km, price):
        assert tariff.price_for_distance(distance_km) == price

    def test_custom_tiers(self):
        tariff = ShippingTariff(
            same_city_price=100.0,
            tiers=[RateTier(max_distance_km=10, price=150.0)],
            beyond_price=900.0,
        )
        assert tariff.price_for_distance(10) == 150.0
        assert tariff.price_for_distance(11) == 900.0

    def test_tiers_must_ascend(self):
        with pytest.raises(SettingsValidationError):
            ShippingTariff(
                tiers=[
                    RateTier(max_distance_km=100, price=700.0),
                    RateTier(max_distance_km=50, price=350.0),
                ]
            )


class TestPriceQuote:
    def test_same_city_ignores_case(self, tariff):
        assert price_quote("Colombo", "colombo", 0.0, tariff) == 250.0

    def test_same_city_wins_over_measured_distance(self, tariff):
        assert price_quote("KANDY", "kandy ", 14.0, tariff) == 250.0

    def test_different_city_at_zero_distance_uses_first_tier(self, tariff):
        assert price_quote("Dehiwala", "Colombo", 0.0, tariff) == 350.0

    def test_long_haul(self, tariff):
        assert price_quote("Jaffna", "Colombo", 395.0, tariff) == 1200.0


class TestOriginGrouping:
    def test_normalize_collapses_whitespace_and_case(self):
        assert normalize_city("  Nuwara   Eliya ") == "nuwara eliya"

    def test_group_keeps_first_spelling(self):
        origins = group_origins(
            [
                ShippingLine(origin_city="Kandy"),
                ShippingLine(origin_city="KANDY"),
                ShippingLine(origin_city="Galle"),
            ]
        )
        assert origins == {"kandy": "Kandy", "galle": "Galle"}
