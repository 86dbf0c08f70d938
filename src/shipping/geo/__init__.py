"""Geo adapter factory.

Provides get_geo() / set_geo() to swap implementations:
- FakeGeoAdapter for development and testing
- OpenRouteServiceAdapter for production
"""

from shared.config import get_settings
from shipping.geo.fake_adapter import FakeGeoAdapter
from shipping.geo.port import Coordinates, GeoPort

__all__ = ["Coordinates", "GeoPort", "get_geo", "reset_geo", "set_geo"]

_current_geo: GeoPort | None = None


def get_geo() -> GeoPort:
    """Return the configured geo adapter (singleton)."""
    global _current_geo
    if _current_geo is None:
        settings = get_settings().geo
        if settings.provider == "fake":
            _current_geo = FakeGeoAdapter()
        elif settings.provider == "openroute":
            from shipping.geo.openroute_adapter import OpenRouteServiceAdapter

            _current_geo = OpenRouteServiceAdapter(settings)
        else:
            raise ValueError(f"Unknown geo provider: {settings.provider}")
    return _current_geo


def set_geo(geo: GeoPort) -> None:
    """Override the active geo adapter (useful for tests)."""
    global _current_geo
    _current_geo = geo


def reset_geo() -> None:
    """Reset to the configured adapter."""
    global _current_geo
    _current_geo = None
