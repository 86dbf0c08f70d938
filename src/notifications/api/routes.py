"""FastAPI routes for the Notifications domain.

Thin adapters that translate HTTP requests into domain commands.
No business logic: just schema→command→response translation.
"""

import json

from fastapi import APIRouter
from notifications.api.schemas import (
    GradesResponse,
    ListingReviewRequest,
    ListingReviewResponse,
    NotificationListResponse,
    NotificationResponse,
    SetGradesRequest,
    StatusResponse,
)
from notifications.notification.listing import MarkNotificationRead, ReviewListing
from notifications.notification.queries import notifications_for
from notifications.preference.management import SetGradePreferences
from protean.utils.globals import current_domain

router = APIRouter(tags=["notifications"])


# ---------------------------------------------------------------------------
# Listing moderation
# ---------------------------------------------------------------------------
@router.put("/listings/{product_id}/review", response_model=ListingReviewResponse)
def review_listing(product_id: str, body: ListingReviewRequest) -> ListingReviewResponse:
    """Approve or reject a listing; approval notifies buyers following its grade."""
    command = ReviewListing(
        product_id=product_id,
        status=body.status,
        name=body.name,
        grade=body.grade,
        quantity=body.quantity,
        address=body.address,
        city=body.city,
        image=body.image,
    )
    outcome = current_domain.process(command, asynchronous=False)
    return ListingReviewResponse(product_id=product_id, **outcome)


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------
@router.put("/preferences/{customer_id}/grades", response_model=GradesResponse)
def set_grade_preferences(customer_id: str, body: SetGradesRequest) -> GradesResponse:
    command = SetGradePreferences(customer_id=customer_id, grades=json.dumps(body.grades))
    grades = current_domain.process(command, asynchronous=False)
    return GradesResponse(customer_id=customer_id, grades=grades)


# ---------------------------------------------------------------------------
# Inbox
# ---------------------------------------------------------------------------
@router.get("/notifications/{recipient_id}", response_model=NotificationListResponse)
def list_notifications(recipient_id: str, unread_only: bool = False) -> NotificationListResponse:
    """A buyer's listing notifications, newest first."""
    items = [NotificationResponse(**view) for view in notifications_for(recipient_id, unread_only)]
    return NotificationListResponse(notifications=items, unread=sum(1 for n in items if not n.read))


@router.put("/notifications/{notification_id}/read", response_model=StatusResponse)
def mark_notification_read(notification_id: str) -> StatusResponse:
    current_domain.process(MarkNotificationRead(notification_id=notification_id), asynchronous=False)
    return StatusResponse()
