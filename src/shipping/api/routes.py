"""FastAPI routes for shipping quotes."""

from dataclasses import asdict

from fastapi import APIRouter

from shared.config import get_settings
from shipping.api.schemas import QuoteLegSchema, QuoteRequest, QuoteResponse
from shipping.geo import get_geo
from shipping.rates import ShippingLine, ShippingRateEngine

shipping_router = APIRouter(prefix="/shipping", tags=["shipping"])


@shipping_router.post("/quotes", response_model=QuoteResponse)
async def quote_shipping(body: QuoteRequest) -> QuoteResponse:
    engine = ShippingRateEngine(get_geo(), get_settings().shipping)
    estimate = await engine.quote(
        [
            ShippingLine(origin_city=line.origin_city, product_id=line.product_id, seller_email=line.seller_email)
            for line in body.lines
        ],
        body.destination_city,
    )
    return QuoteResponse(
        total=estimate.total,
        currency=estimate.currency,
        quotes=[QuoteLegSchema(**asdict(quote)) for quote in estimate.quotes],
    )
