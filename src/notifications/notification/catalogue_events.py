"""Inbound cross-domain event handler: Notifications reacts to listing approvals.

Approvals may be delivered more than once (retries, replays); the
per-(buyer, product) upsert keeps one notification per pair.
"""

import structlog
from notifications.domain import notifications
from notifications.notification.helpers import ListingSnapshot, announce_listing
from notifications.notification.notification import ListingNotification
from protean.utils.mixins import handle
from shared.events.listings import ListingApproved

logger = structlog.get_logger(__name__)

notifications.register_external_event(ListingApproved, "Catalogue.ListingApproved.v1")


@notifications.event_handler(part_of=ListingNotification, stream_category="catalogue::listing")
class CatalogueEventsHandler:
    """Announces approved listings to buyers following the listing's grade."""

    @handle(ListingApproved)
    def on_listing_approved(self, event: ListingApproved) -> None:
        announce_listing(
            ListingSnapshot(
                product_id=str(event.product_id),
                name=event.name,
                grade=event.grade,
                quantity=event.quantity,
                address=event.seller_address or "",
                city=event.seller_city or "",
                image=event.image or "",
            )
        )
