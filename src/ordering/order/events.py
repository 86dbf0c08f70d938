"""Domain events for the Order aggregate.

Events are versioned, immutable facts. Payout events drive the seller
notification handler; the rest feed downstream consumers (reporting,
support tooling) through the outbox.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A paid checkout was persisted as an Order."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_id = String(required=True)
    buyer_email = String(required=True)
    seller_count = Integer(required=True)
    transport_mode = String(required=True)
    transport_cost = Float(required=True)
    total_price = Float(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class ShipmentBooked:
    """A carrier accepted the shipment for one seller group."""

    __version__ = 1

    order_id = Identifier(required=True)
    seller_group_id = Identifier(required=True)
    shipment_id = String(required=True)
    tracking_number = String()
    label_url = String()


@ordering.event(part_of="Order")
class PayoutLinkIssued:
    """A collectible payout link was created for one seller group."""

    __version__ = 1

    order_id = Identifier(required=True)
    seller_group_id = Identifier(required=True)
    seller_name = String(required=True)
    seller_email = String(required=True)
    source_amount = Float(required=True)
    source_currency = String(required=True)
    amount = Float(required=True)
    currency = String(required=True)
    payout_link = String(required=True)
    expires_at = DateTime()


@ordering.event(part_of="Order")
class PayoutConfirmed:
    """The operator confirmed that a seller group was paid."""

    __version__ = 1

    order_id = Identifier(required=True)
    seller_group_id = Identifier(required=True)
    paid_at = DateTime(required=True)


@ordering.event(part_of="Order")
class ReviewAdded:
    """A buyer reviewed one product line of an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    product_line_id = Identifier(required=True)
    product_id = Identifier(required=True)
    rating = Integer(required=True)
    reviewer_name = String(required=True)
    submitted_at = DateTime(required=True)
