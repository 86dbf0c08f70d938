"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands. Business rules (required buyer and seller
details, transport cost rules, totals) are enforced by the domain so that
they report the same errors whichever entry point is used.
"""

from datetime import datetime

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class PartySchema(BaseModel):
    name: str = ""
    email: str = ""
    address: str = ""
    city: str = ""


class CartItemSchema(BaseModel):
    product_id: str
    name: str
    unit_price: float
    quantity: int
    grade: str = ""
    image: str = ""
    seller: PartySchema


class PaymentSchema(BaseModel):
    payment_id: str | None = None
    status: str
    method: str = ""
    amount: float | None = None
    currency: str = ""
    captured_at: datetime | None = None


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class SubmitOrderRequest(BaseModel):
    buyer: PartySchema
    items: list[CartItemSchema]
    transport_mode: str
    transport_cost: float = 0.0
    total_price: float | None = None
    payment: PaymentSchema

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "buyer": {
                        "name": "Green Grocers Ltd",
                        "email": "buying@greengrocers.lk",
                        "address": "12 Galle Road",
                        "city": "Colombo",
                    },
                    "items": [
                        {
                            "product_id": "prod-rice-01",
                            "name": "Samba Rice",
                            "unit_price": 220.0,
                            "quantity": 50,
                            "grade": "A",
                            "seller": {
                                "name": "Nimal Perera",
                                "email": "nimal@farm.lk",
                                "address": "Farm Lane 4",
                                "city": "Kurunegala",
                            },
                        }
                    ],
                    "transport_mode": "Delivery",
                    "transport_cost": 1200.0,
                    "total_price": 12200.0,
                    "payment": {"payment_id": "PAY-123", "status": "COMPLETED", "method": "PayPal"},
                }
            ]
        }
    }


class ReviewRequest(BaseModel):
    rating: int
    comment: str | None = None
    reviewer_name: str


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class OrderListResponse(BaseModel):
    orders: list[dict]


class ReviewIdResponse(BaseModel):
    review_id: str


class ReviewListResponse(BaseModel):
    reviews: list[dict]


class ShipmentBookingResponse(BaseModel):
    booked: list[str]
    failed: list[str]
