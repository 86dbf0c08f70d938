"""Shipping Rate Engine: one consolidated delivery cost for a multi-seller cart.

Cart lines are grouped by origin city, so lines shipped from the same city
share one quote. For each distinct origin the engine geocodes the origin,
reuses the destination's coordinates, and measures the road distance; the
origin's price comes from the configured tariff. All origin lookups run
concurrently inside a ``TaskGroup``; the first failure cancels the rest and
fails the whole estimate. A partial total is never returned.
"""

import asyncio
import math
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from shared.config import ShippingSettings, ShippingTariff
from shared.errors import GeoLookupError, InvalidShippingInputError, ShippingComputationError
from shipping.geo.port import Coordinates, GeoPort

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ShippingLine:
    """The part of a cart line the engine cares about."""

    origin_city: str
    product_id: str | None = None
    seller_email: str | None = None


@dataclass(frozen=True)
class ShippingQuote:
    origin_city: str
    destination_city: str
    distance_km: float
    price: float
    same_city: bool


@dataclass(frozen=True)
class ShippingEstimate:
    total: float
    currency: str
    quotes: tuple[ShippingQuote, ...]


def normalize_city(city: str) -> str:
    """Comparison key for city names: whitespace-collapsed and case-folded."""
    return " ".join(city.split()).casefold()


def price_quote(origin_city: str, destination_city: str, distance_km: float, tariff: ShippingTariff) -> float:
    """Price one origin-to-destination leg.

    Matching city names (ignoring case) always take the same-city price,
    whatever the measured distance. Otherwise the first tier whose bound is
    at least the distance applies; bounds are inclusive.
    """
    if normalize_city(origin_city) == normalize_city(destination_city):
        return tariff.same_city_price
    return tariff.price_for_distance(distance_km)


def group_origins(lines: Iterable[ShippingLine]) -> dict[str, str]:
    """Map each normalized origin to the first spelling seen in the cart."""
    origins: dict[str, str] = {}
    for line in lines:
        origins.setdefault(normalize_city(line.origin_city), line.origin_city.strip())
    return origins


class ShippingRateEngine:
    def __init__(self, geo: GeoPort, settings: ShippingSettings) -> None:
        self.geo = geo
        self.settings = settings

    async def quote(self, lines: Iterable[ShippingLine], destination_city: str) -> ShippingEstimate:
        lines = list(lines)
        self._validate(lines, destination_city)

        origins = group_origins(lines)
        destination_city = destination_city.strip()

        try:
            async with asyncio.TaskGroup() as tg:
                destination_task = tg.create_task(self._geocode(destination_city))
                tasks = [
                    tg.create_task(self._quote_origin(origin, destination_city, destination_task))
                    for origin in origins.values()
                ]
        except ExceptionGroup as eg:
            first = eg.exceptions[0]
            logger.warning(
                "Shipping estimate aborted",
                destination_city=destination_city,
                origins=list(origins.values()),
                error=str(first),
            )
            raise first from None

        quotes = tuple(task.result() for task in tasks)
        total = round(math.fsum(q.price for q in quotes), 2)

        logger.info(
            "Shipping estimate computed",
            destination_city=destination_city,
            origin_count=len(quotes),
            total=total,
        )
        return ShippingEstimate(total=total, currency=self.settings.currency, quotes=quotes)

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    @staticmethod
    def _validate(lines: list[ShippingLine], destination_city: str) -> None:
        if not lines:
            raise InvalidShippingInputError("Cart is empty; nothing to ship")
        if not isinstance(destination_city, str) or not destination_city.strip():
            raise InvalidShippingInputError("Destination city is required")
        for index, line in enumerate(lines):
            if not isinstance(line.origin_city, str) or not line.origin_city.strip():
                raise InvalidShippingInputError("Every cart line needs an origin city", line=index)

    async def _geocode(self, city: str) -> Coordinates:
        try:
            async with asyncio.timeout(self.settings.lookup_timeout_seconds):
                return await self.geo.geocode(city)
        except TimeoutError:
            raise ShippingComputationError(f"Geocoding '{city}' timed out", city=city) from None
        except GeoLookupError as e:
            raise ShippingComputationError(e.message, city=city) from e

    async def _distance(self, origin: Coordinates, destination: Coordinates, origin_city: str) -> float:
        if origin == destination:
            return 0.0
        try:
            async with asyncio.timeout(self.settings.lookup_timeout_seconds):
                return await self.geo.road_distance_km(origin, destination)
        except TimeoutError:
            raise ShippingComputationError("Routing lookup timed out", origin_city=origin_city) from None
        except GeoLookupError as e:
            raise ShippingComputationError(e.message, origin_city=origin_city) from e

    async def _quote_origin(
        self, origin_city: str, destination_city: str, destination_task: asyncio.Task
    ) -> ShippingQuote:
        origin_point = await self._geocode(origin_city)
        destination_point = await destination_task
        distance_km = await self._distance(origin_point, destination_point, origin_city)

        return ShippingQuote(
            origin_city=origin_city,
            destination_city=destination_city,
            distance_km=distance_km,
            price=price_quote(origin_city, destination_city, distance_km, self.settings.tariff),
            same_city=normalize_city(origin_city) == normalize_city(destination_city),
        )
