"""Pydantic request/response schemas for the Shipping API."""

from pydantic import BaseModel


class QuoteLineSchema(BaseModel):
    origin_city: str = ""
    product_id: str | None = None
    seller_email: str | None = None


class QuoteRequest(BaseModel):
    destination_city: str = ""
    lines: list[QuoteLineSchema]

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "destination_city": "Colombo",
                    "lines": [
                        {"origin_city": "Kandy", "product_id": "prod-001", "seller_email": "kamal@farm.lk"},
                        {"origin_city": "Jaffna", "product_id": "prod-002", "seller_email": "sara@farm.lk"},
                    ],
                }
            ]
        }
    }


class QuoteLegSchema(BaseModel):
    origin_city: str
    destination_city: str
    distance_km: float
    price: float
    same_city: bool


class QuoteResponse(BaseModel):
    total: float
    currency: str
    quotes: list[QuoteLegSchema]
