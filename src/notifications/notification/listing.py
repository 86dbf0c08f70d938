"""Listing review and notification read: commands + handlers.

``ReviewListing`` records an operator's verdict on a catalogue listing.
Approval announces the listing to every interested buyer; rejection
notifies nobody.
"""

from enum import Enum

import structlog
from notifications.domain import notifications
from notifications.notification.helpers import ListingSnapshot, announce_listing
from notifications.notification.notification import ListingNotification
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

logger = structlog.get_logger(__name__)


class ListingVerdict(Enum):
    APPROVED = "Approved"
    REJECTED = "Rejected"


def parse_verdict(value) -> ListingVerdict:
    key = str(value or "").strip().casefold()
    for verdict in ListingVerdict:
        if key in (verdict.name.casefold(), verdict.value.casefold()):
            return verdict
    raise ValidationError({"status": [f"Invalid listing status '{value}'; expected Approved or Rejected"]})


@notifications.command(part_of="ListingNotification")
class ReviewListing:
    product_id: Identifier(required=True)
    status: String(required=True)
    name: String(required=True, max_length=255)
    grade: String(required=True, max_length=50)
    quantity: Float()
    address: String(max_length=500)
    city: String(max_length=100)
    image: String(max_length=2000)


@notifications.command(part_of="ListingNotification")
class MarkNotificationRead:
    notification_id: Identifier(required=True)


@notifications.command_handler(part_of=ListingNotification)
class ListingNotificationHandler:
    @handle(ReviewListing)
    def review_listing(self, command: ReviewListing):
        verdict = parse_verdict(command.status)
        if verdict == ListingVerdict.REJECTED:
            logger.info("Listing rejected; nobody notified", product_id=str(command.product_id))
            return {"status": verdict.value, "notified": []}

        created = announce_listing(
            ListingSnapshot(
                product_id=str(command.product_id),
                name=command.name,
                grade=command.grade,
                quantity=command.quantity,
                address=command.address or "",
                city=command.city or "",
                image=command.image or "",
            )
        )
        return {"status": verdict.value, "notified": created}

    @handle(MarkNotificationRead)
    def mark_read(self, command: MarkNotificationRead):
        repo = current_domain.repository_for(ListingNotification)
        notification = repo.get(command.notification_id)
        notification.mark_read()
        repo.add(notification)
