"""Read side for a buyer's listing notifications."""

from notifications.notification.notification import ListingNotification
from protean.utils.globals import current_domain
from shared.paging import each_item


def notification_view(notification: ListingNotification) -> dict:
    return {
        "notification_id": str(notification.id),
        "recipient_id": str(notification.recipient_id),
        "product_id": str(notification.product_id),
        "grade": notification.grade,
        "message": notification.get_message(),
        "read": notification.read,
        "read_at": notification.read_at.isoformat() if notification.read_at else None,
        "created_at": notification.created_at.isoformat() if notification.created_at else None,
    }


def notifications_for(recipient_id, unread_only: bool = False) -> list[dict]:
    """A recipient's notifications, newest first."""
    repo = current_domain.repository_for(ListingNotification)
    query = repo._dao.query.filter(recipient_id=str(recipient_id))
    if unread_only:
        query = query.filter(read=False)
    return [notification_view(n) for n in each_item(query.order_by("-created_at"))]
