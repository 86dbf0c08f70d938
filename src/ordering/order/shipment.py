"""Shipment booking: command and handler.

Each seller group of a delivery order ships separately, from the seller's
city to the buyer. Groups that already hold a shipment reference are
skipped, so the command is safe to repeat after a partial failure.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.carrier import get_carrier
from ordering.carrier.addresses import build_shipment_request
from ordering.domain import ordering
from ordering.order.aggregation import TransportMode
from ordering.order.order import Order
from shared.config import get_settings
from shared.errors import ShipmentBookingError

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class BookShipments:
    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class ShipmentHandler:
    @handle(BookShipments)
    def book_shipments(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if order.transport_mode != TransportMode.DELIVERY.value:
            logger.info("Pickup order needs no shipment", order_id=str(order.id))
            return {"booked": [], "failed": []}

        settings = get_settings()
        carrier = get_carrier()
        booked, failed = [], []

        for group in order.groups_in_order():
            if group.shipment_id:
                continue

            request = build_shipment_request(order, group, settings.carrier, settings.shipping.currency)
            result = carrier.create_shipment(request)

            if result.get("error") or not result.get("shipment_id"):
                logger.warning(
                    "Shipment booking failed for seller group",
                    order_id=str(order.id),
                    seller_group_id=str(group.id),
                    error=result.get("error"),
                )
                failed.append(str(group.id))
                continue

            order.record_shipment(
                group.id,
                shipment_id=result["shipment_id"],
                tracking_number=result.get("tracking_number"),
                label_url=result.get("label_url"),
            )
            booked.append(str(group.id))

        if booked:
            repo.add(order)

        if failed and not booked:
            raise ShipmentBookingError(
                "The carrier could not book any shipment for this order",
                order_id=str(order.id),
                seller_group_ids=failed,
            )

        return {"booked": booked, "failed": failed}
