"""Table-driven fake geo adapter for development and testing.

Cities map to fixed coordinates and city pairs map to fixed distances, so
quotes are deterministic. Latency and failures can be injected per city to
exercise timeouts and fail-fast cancellation.
"""

import asyncio

from shared.errors import GeoLookupError
from shipping.geo.port import Coordinates, GeoPort


def _key(city: str) -> str:
    return city.strip().casefold()


class FakeGeoAdapter(GeoPort):
    """Configurable in-memory geocoder and router."""

    def __init__(self) -> None:
        self.cities: dict[str, Coordinates] = {}
        self.distances: dict[frozenset, float] = {}
        self.failing_cities: dict[str, str] = {}
        self.delays: dict[str, float] = {}
        self.calls: list[dict] = []
        self.cancelled: list[str] = []

    def add_city(self, city: str, latitude: float, longitude: float) -> None:
        self.cities[_key(city)] = Coordinates(latitude=latitude, longitude=longitude)

    def set_distance(self, city_a: str, city_b: str, distance_km: float) -> None:
        a, b = self.cities[_key(city_a)], self.cities[_key(city_b)]
        self.distances[frozenset((a, b))] = distance_km

    def fail_city(self, city: str, reason: str = "Geocoding service unavailable") -> None:
        self.failing_cities[_key(city)] = reason

    def delay_city(self, city: str, seconds: float) -> None:
        self.delays[_key(city)] = seconds

    async def geocode(self, city: str) -> Coordinates:
        key = _key(city)
        self.calls.append({"method": "geocode", "city": city})

        try:
            if key in self.delays:
                await asyncio.sleep(self.delays[key])
        except asyncio.CancelledError:
            self.cancelled.append(city)
            raise

        if key in self.failing_cities:
            raise GeoLookupError(self.failing_cities[key], city=city)
        if key not in self.cities:
            raise GeoLookupError(f"City '{city}' could not be resolved", city=city)
        return self.cities[key]

    async def road_distance_km(self, origin: Coordinates, destination: Coordinates) -> float:
        self.calls.append({"method": "road_distance_km", "origin": origin, "destination": destination})

        if origin == destination:
            return 0.0
        try:
            return self.distances[frozenset((origin, destination))]
        except KeyError:
            raise GeoLookupError("No route found between the given coordinates") from None
