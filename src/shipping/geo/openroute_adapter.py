"""OpenRouteService geo adapter.

Geocoding uses ``/geocode/search`` and takes the first feature; routing uses
``/v2/directions/{profile}`` and reports the route summary distance in
kilometres, rounded to two decimals. Any transport error, non-2xx response or
empty result is reported as a ``GeoLookupError``.
"""

import httpx
import structlog

from shared.config import GeoSettings
from shared.errors import GeoLookupError
from shipping.geo.port import Coordinates, GeoPort, validate_coordinates

logger = structlog.get_logger(__name__)


class OpenRouteServiceAdapter(GeoPort):
    def __init__(self, settings: GeoSettings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.settings.base_url, transport=self._transport)

    async def geocode(self, city: str) -> Coordinates:
        params = {"api_key": self.settings.api_key.get_secret_value(), "text": city, "size": 1}

        async with self._client() as client:
            try:
                response = await client.get("/geocode/search", params=params)
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as e:
                logger.error("Geocoding request rejected", city=city, status_code=e.response.status_code)
                raise GeoLookupError(f"Geocoding failed for '{city}'", city=city) from e
            except httpx.HTTPError as e:
                logger.error("Geocoding request failed", city=city, error=str(e))
                raise GeoLookupError(f"Geocoding failed for '{city}'", city=city) from e
            except ValueError as e:
                logger.error("Geocoder returned an unreadable reply", city=city, error=str(e))
                raise GeoLookupError(f"Geocoding failed for '{city}'", city=city) from e

        features = data.get("features") or []
        if not features:
            raise GeoLookupError(f"City '{city}' could not be resolved", city=city)

        point = (features[0].get("geometry") or {}).get("coordinates") or []
        if len(point) < 2:
            raise GeoLookupError(f"Geocoder returned no coordinates for '{city}'", city=city)

        longitude, latitude = point[0], point[1]
        validate_coordinates(latitude, longitude)
        return Coordinates(latitude=latitude, longitude=longitude)

    async def road_distance_km(self, origin: Coordinates, destination: Coordinates) -> float:
        if origin == destination:
            return 0.0

        headers = {"Authorization": self.settings.api_key.get_secret_value()}
        payload = {"coordinates": [origin.as_lng_lat(), destination.as_lng_lat()]}

        async with self._client() as client:
            try:
                response = await client.post(f"/v2/directions/{self.settings.profile}", json=payload, headers=headers)
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as e:
                logger.error("Routing request rejected", status_code=e.response.status_code)
                raise GeoLookupError("Routing service rejected the request") from e
            except httpx.HTTPError as e:
                logger.error("Routing request failed", error=str(e))
                raise GeoLookupError("Routing service unavailable") from e
            except ValueError as e:
                logger.error("Routing service returned an unreadable reply", error=str(e))
                raise GeoLookupError("Routing service returned an unreadable reply") from e

        routes = data.get("routes") or []
        distance_m = (routes[0].get("summary") or {}).get("distance") if routes else None
        if distance_m is None:
            raise GeoLookupError("No route found between the given coordinates")

        return round(float(distance_m) / 1000, 2)
