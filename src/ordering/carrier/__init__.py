"""Carrier adapter abstraction: pluggable shipping carrier integration."""

from shared.config import get_settings

_carrier_instance = None


def get_carrier():
    """Return the configured carrier adapter (singleton).

    Uses FakeCarrier by default. In production, configure via the
    ``MARKETPLACE_CARRIER__ADAPTER`` environment variable.
    """
    global _carrier_instance
    if _carrier_instance is None:
        settings = get_settings().carrier
        if settings.adapter == "fake":
            from ordering.carrier.fake_adapter import FakeCarrier

            _carrier_instance = FakeCarrier()
        elif settings.adapter == "shipengine":
            from ordering.carrier.shipengine_adapter import ShipEngineCarrier

            _carrier_instance = ShipEngineCarrier(settings)
        else:
            raise ValueError(f"Unknown carrier adapter: {settings.adapter}")
    return _carrier_instance


def set_carrier(carrier) -> None:
    """Override the active carrier adapter (useful for tests)."""
    global _carrier_instance
    _carrier_instance = carrier


def reset_carrier():
    """Reset the carrier singleton (useful for testing)."""
    global _carrier_instance
    _carrier_instance = None
