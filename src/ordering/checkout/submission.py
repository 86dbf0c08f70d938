"""Checkout submission: from a paid cart to a persisted (and possibly shipped) order.

1. Place the order through the payment gate (``PlaceOrder``).
2. For delivery orders, book shipments (``BookShipments``).

The order is committed before any carrier call. A booking failure is
logged and the order is returned without shipment references; it can be
booked later through the same command.
"""

import json

import structlog
from protean.utils.globals import current_domain

from ordering.order.aggregation import OrderDraft, PaymentAssertion, TransportMode
from ordering.order.order import Order
from ordering.order.placement import PlaceOrder
from ordering.order.shipment import BookShipments
from shared.errors import ShipmentBookingError

logger = structlog.get_logger(__name__)


def place_order_command(draft: OrderDraft, payment: PaymentAssertion) -> PlaceOrder:
    return PlaceOrder(
        buyer=json.dumps(
            {
                "name": draft.buyer.name,
                "email": draft.buyer.email,
                "address": draft.buyer.address,
                "city": draft.buyer.city,
            }
        ),
        seller_groups=json.dumps(draft.groups_payload()),
        transport_mode=draft.transport_mode.value,
        transport_cost=draft.transport_cost,
        total_price=draft.total_price,
        payment_id=payment.payment_id,
        payment_status=payment.status,
        payment_method=payment.method or None,
        payment_amount=payment.amount,
        payment_currency=payment.currency or None,
        captured_at=payment.captured_at,
    )


def submit_paid_order(draft: OrderDraft, payment: PaymentAssertion) -> Order:
    order_id = current_domain.process(place_order_command(draft, payment), asynchronous=False)

    if draft.transport_mode == TransportMode.DELIVERY:
        try:
            result = current_domain.process(BookShipments(order_id=order_id), asynchronous=False)
        except ShipmentBookingError as exc:
            logger.warning(
                "Order retained without shipment; booking needs manual follow-up",
                order_id=order_id,
                error=exc.message,
            )
        except Exception:
            logger.exception("Order retained without shipment; booking raised unexpectedly", order_id=order_id)
        else:
            if result["failed"]:
                logger.warning(
                    "Some seller groups were not booked; manual follow-up needed",
                    order_id=order_id,
                    failed_seller_groups=result["failed"],
                )

    return current_domain.repository_for(Order).get(order_id)
