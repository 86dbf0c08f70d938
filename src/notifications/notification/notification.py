"""ListingNotification aggregate (CQRS): "a product you follow was listed".

There is at most one notification per (recipient, product) pair. The
aggregate id is derived from the pair, so any repeat of the same approval
resolves to the row created the first time.

Read flag: unread → read, never back.
"""

import json
from datetime import UTC, datetime
from uuid import NAMESPACE_URL, uuid5

from notifications.domain import notifications
from notifications.notification.events import ListingNotificationCreated, ListingNotificationRead
from protean.fields import Boolean, DateTime, Identifier, String, Text

LISTING_ANNOUNCEMENT = "A new product has been listed!"

_NOTIFICATION_NAMESPACE = uuid5(NAMESPACE_URL, "harvest-exchange/listing-notifications")


def notification_id_for(recipient_id, product_id) -> str:
    """Deterministic identity of the (recipient, product) notification."""
    return str(uuid5(_NOTIFICATION_NAMESPACE, f"{recipient_id}:{product_id}"))


@notifications.aggregate
class ListingNotification:
    recipient_id: Identifier(required=True)
    product_id: Identifier(required=True)
    grade: String(max_length=50)
    message: Text(required=True)  # JSON: {text, details}
    read: Boolean(default=False)
    read_at: DateTime()
    created_at: DateTime()

    @classmethod
    def announce(cls, recipient_id, listing):
        """Create the notification telling ``recipient_id`` about ``listing``."""
        now = datetime.now(UTC)
        message = {
            "text": LISTING_ANNOUNCEMENT,
            "details": {
                "name": listing.name,
                "quantity": listing.quantity,
                "grade": listing.grade,
                "address": listing.address,
                "location": listing.city,
                "image": listing.image,
            },
        }

        notification = cls(
            id=notification_id_for(recipient_id, listing.product_id),
            recipient_id=recipient_id,
            product_id=listing.product_id,
            grade=listing.grade,
            message=json.dumps(message),
            read=False,
            created_at=now,
        )

        notification.raise_(
            ListingNotificationCreated(
                notification_id=str(notification.id),
                recipient_id=str(recipient_id),
                product_id=str(listing.product_id),
                grade=listing.grade,
                created_at=now,
            )
        )
        return notification

    def mark_read(self):
        if self.read:
            return

        now = datetime.now(UTC)
        self.read = True
        self.read_at = now

        self.raise_(
            ListingNotificationRead(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                read_at=now,
            )
        )

    def get_message(self) -> dict:
        return json.loads(self.message) if self.message else {}
