"""Geo-rate port (abstract interface).

Two lookups back every shipping quote: a city name resolved to coordinates,
and a road distance between two coordinate pairs. Adapters talk to a real
geocoding/routing service or to an in-memory table.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

from shared.errors import InvalidCoordinatesError


@dataclass(frozen=True)
class Coordinates:
    """A WGS84 point."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        validate_coordinates(self.latitude, self.longitude)

    def as_lng_lat(self) -> list[float]:
        return [self.longitude, self.latitude]


def validate_coordinates(latitude, longitude) -> None:
    """Reject missing, non-numeric, non-finite or out-of-range coordinates."""
    for label, value in (("latitude", latitude), ("longitude", longitude)):
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise InvalidCoordinatesError(f"{label} must be a number", value=repr(value))
        if not math.isfinite(value):
            raise InvalidCoordinatesError(f"{label} must be finite", value=repr(value))

    if not -90.0 <= latitude <= 90.0:
        raise InvalidCoordinatesError("latitude must be within [-90, 90]", value=latitude)
    if not -180.0 <= longitude <= 180.0:
        raise InvalidCoordinatesError("longitude must be within [-180, 180]", value=longitude)


class GeoPort(ABC):
    """Abstract geocoding and routing interface."""

    @abstractmethod
    async def geocode(self, city: str) -> Coordinates:
        """Resolve a city name to coordinates.

        Raises:
            GeoLookupError: the city cannot be resolved or the service failed.
        """
        ...

    @abstractmethod
    async def road_distance_km(self, origin: Coordinates, destination: Coordinates) -> float:
        """Road distance in kilometres; ``0.0`` when the points are identical.

        Raises:
            GeoLookupError: no route was produced or the service failed.
        """
        ...
