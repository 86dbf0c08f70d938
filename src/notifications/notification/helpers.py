"""Shared helpers for listing announcements.

Provides the common pattern: find buyers following the listing's grade →
upsert one ListingNotification per (buyer, product).
"""

from dataclasses import dataclass

import structlog
from notifications.notification.notification import ListingNotification, notification_id_for
from notifications.preference.preference import GradePreference
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from shared.paging import each_item

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ListingSnapshot:
    """The approved product, as announced to buyers."""

    product_id: str
    name: str
    grade: str
    quantity: float | None = None
    address: str = ""
    city: str = ""
    image: str = ""


def interested_recipients(grade: str) -> list[str]:
    """Customer ids whose grade preferences include ``grade``."""
    repo = current_domain.repository_for(GradePreference)
    preferences = each_item(repo._dao.query.order_by("customer_id"))
    return [str(pref.customer_id) for pref in preferences if pref.wants(grade)]


def announce_listing(listing: ListingSnapshot) -> list[str]:
    """Upsert a notification for every interested buyer.

    A pair that already has a notification is left untouched (including its
    read flag). Returns the ids of notifications created by this call.
    """
    repo = current_domain.repository_for(ListingNotification)
    created = []

    for recipient_id in interested_recipients(listing.grade):
        notification_id = notification_id_for(recipient_id, listing.product_id)
        try:
            repo.get(notification_id)
        except ObjectNotFoundError:
            repo.add(ListingNotification.announce(recipient_id, listing))
            created.append(notification_id)

    logger.info(
        "Listing announced",
        product_id=listing.product_id,
        grade=listing.grade,
        notifications_created=len(created),
    )
    return created
