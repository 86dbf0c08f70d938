"""Pydantic request/response models for the Notifications API.

API schemas are separate from Protean commands (anti-corruption pattern).
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------
class ListingReviewRequest(BaseModel):
    status: str = Field(..., examples=["Approved"], description="Approved or Rejected")
    name: str = Field(..., min_length=1, max_length=255)
    grade: str = Field(..., min_length=1, max_length=50, examples=["A"])
    quantity: float | None = None
    address: str = ""
    city: str = ""
    image: str = ""


class SetGradesRequest(BaseModel):
    grades: list[str] = Field(default_factory=list, examples=[["A", "B"]])


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class ListingReviewResponse(BaseModel):
    product_id: str
    status: str
    notified: list[str]


class GradesResponse(BaseModel):
    customer_id: str
    grades: list[str]


class NotificationResponse(BaseModel):
    notification_id: str
    recipient_id: str
    product_id: str
    grade: str | None = None
    message: dict
    read: bool
    read_at: str | None = None
    created_at: str | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    unread: int
