"""Domain events for the ListingNotification aggregate."""

from notifications.domain import notifications
from protean.fields import DateTime, Identifier, String


@notifications.event(part_of="ListingNotification")
class ListingNotificationCreated:
    """A recipient was told about a newly approved listing."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    product_id: Identifier(required=True)
    grade: String()
    created_at: DateTime(required=True)


@notifications.event(part_of="ListingNotification")
class ListingNotificationRead:
    """The recipient opened the notification."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    read_at: DateTime(required=True)
