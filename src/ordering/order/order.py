"""Order aggregate: one paid checkout, split into per-seller groups.

An Order is created exactly once per completed payment and owns everything
bought in that checkout:

- ``buyer``: who paid and where the goods go (immutable snapshot).
- ``seller_groups``: one per seller, each carrying the seller's snapshot, its
  payout lifecycle and, for deliveries, its shipment reference.
- ``product_lines``: priced product snapshots, each tagged with the seller
  group it belongs to.
- ``reviews``: buyer reviews, each attached to one product line.

Payout State Machine (per seller group):
    PENDING → LINK_SENT → PAID

Sibling seller groups settle independently; an action on one group never
touches another group's status.
"""

import math
from datetime import UTC, datetime, timedelta
from enum import Enum

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.aggregation import OrderDraft, PaymentAssertion, TransportMode
from ordering.order.events import (
    OrderPlaced,
    PayoutConfirmed,
    PayoutLinkIssued,
    ReviewAdded,
    ShipmentBooked,
)
from ordering.order.pricing import amounts_match, compute_total_price


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class PaymentStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"


class PayoutStatus(Enum):
    PENDING = "Pending"
    LINK_SENT = "Link Sent"
    PAID = "Paid"


# Payout state machine, one step at a time
_VALID_PAYOUT_TRANSITIONS = {
    PayoutStatus.PENDING: {PayoutStatus.LINK_SENT},
    PayoutStatus.LINK_SENT: {PayoutStatus.PAID},
    PayoutStatus.PAID: set(),  # Terminal
}


def parse_payment_status(value) -> PaymentStatus | None:
    key = str(value or "").strip().casefold()
    for status in PaymentStatus:
        if key in (status.name.casefold(), status.value.casefold()):
            return status
    return None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class Party:
    """Name and location of a buyer or seller, copied at order time.

    Later profile edits never reach historical orders.
    """

    name = String(required=True, max_length=150)
    email = String(required=True, max_length=254)
    address = String(max_length=500)
    city = String(required=True, max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class SellerGroup:
    """One seller's portion of an order."""

    seller = ValueObject(Party, required=True)
    position = Integer(default=0)

    payout_status = String(choices=PayoutStatus, default=PayoutStatus.PENDING.value)
    payout_amount = Float()
    payout_currency = String(max_length=3)
    payout_link = String(max_length=2000)
    payout_reference = String(max_length=255)
    link_expires_at = DateTime()
    link_sent_at = DateTime()
    paid_at = DateTime()

    shipment_id = String(max_length=255)
    tracking_number = String(max_length=255)
    label_url = String(max_length=2000)


@ordering.entity(part_of="Order")
class ProductLine:
    """A priced quantity of one product, snapshotted from the catalogue."""

    seller_group_id = Identifier(required=True)
    position = Integer(default=0)
    product_id = Identifier(required=True)  # Weak reference; the product may be deleted later
    name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    grade = String(max_length=50)
    image = String(max_length=2000)

    @property
    def subtotal(self) -> float:
        return self.unit_price * self.quantity


@ordering.entity(part_of="Order")
class LineReview:
    product_line_id = Identifier(required=True)
    rating = Integer(required=True, min_value=1, max_value=5)
    comment = Text()
    reviewer_name = String(required=True, max_length=150)
    submitted_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    buyer = ValueObject(Party, required=True)
    seller_groups = HasMany(SellerGroup)
    product_lines = HasMany(ProductLine)
    reviews = HasMany(LineReview)

    transport_mode = String(choices=TransportMode, required=True)
    transport_cost = Float(default=0.0, min_value=0.0)
    total_price = Float(required=True, min_value=0.0)

    # Payment snapshot; payment_id is the natural idempotency key
    payment_id = String(required=True, unique=True, max_length=255)
    payment_method = String(max_length=50)
    payment_amount = Float()
    payment_currency = String(max_length=3)
    payment_status = String(choices=PaymentStatus, required=True)
    paid_at = DateTime()

    created_at = DateTime()

    @invariant.post
    def payment_must_be_completed(self):
        if self.payment_status != PaymentStatus.COMPLETED.value:
            raise ValidationError({"payment_status": ["Only completed payments can be recorded as orders"]})

    @invariant.post
    def pickup_orders_carry_no_transport_cost(self):
        if self.transport_mode == TransportMode.PICKUP.value and self.transport_cost:
            raise ValidationError({"transport_cost": ["Transport cost must be 0 for pickup orders"]})

    @invariant.post
    def total_price_must_match_lines(self):
        if not self.product_lines:
            return
        expected = compute_total_price(
            ((line.unit_price, line.quantity) for line in self.product_lines),
            self.transport_cost,
        )
        if not amounts_match(self.total_price, expected):
            raise ValidationError(
                {"total_price": [f"Total {self.total_price} does not equal line subtotals plus transport ({expected})"]}
            )

    @invariant.post
    def every_line_belongs_to_a_seller_group(self):
        if not self.seller_groups or not self.product_lines:
            return
        group_ids = {str(group.id) for group in self.seller_groups}
        orphans = [line for line in self.product_lines if str(line.seller_group_id) not in group_ids]
        if orphans:
            raise ValidationError({"product_lines": ["Every product line must belong to a seller group"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, draft: OrderDraft, payment: PaymentAssertion) -> "Order":
        """Create an Order from a validated draft and a completed payment."""
        if not draft.seller_groups or any(not group.lines for group in draft.seller_groups):
            raise ValidationError({"seller_groups": ["An order needs at least one seller group with products"]})

        status = parse_payment_status(payment.status)
        if status != PaymentStatus.COMPLETED:
            raise ValidationError({"payment_status": ["Only completed payments can be recorded as orders"]})

        now = datetime.now(UTC)
        groups, lines = [], []
        for group_position, group_draft in enumerate(draft.seller_groups):
            group = SellerGroup(
                seller=Party(
                    name=group_draft.seller.name,
                    email=group_draft.seller.email,
                    address=group_draft.seller.address,
                    city=group_draft.seller.city,
                ),
                position=group_position,
                payout_status=PayoutStatus.PENDING.value,
            )
            groups.append(group)
            for line_draft in group_draft.lines:
                lines.append(
                    ProductLine(
                        seller_group_id=group.id,
                        position=len(lines),
                        product_id=line_draft.product_id,
                        name=line_draft.name,
                        unit_price=line_draft.unit_price,
                        quantity=line_draft.quantity,
                        grade=line_draft.grade,
                        image=line_draft.image,
                    )
                )

        order = cls(
            buyer=Party(
                name=draft.buyer.name,
                email=draft.buyer.email,
                address=draft.buyer.address,
                city=draft.buyer.city,
            ),
            seller_groups=groups,
            product_lines=lines,
            transport_mode=draft.transport_mode.value,
            transport_cost=draft.transport_cost,
            total_price=draft.total_price,
            payment_id=payment.payment_id,
            payment_method=payment.method or None,
            payment_amount=payment.amount,
            payment_currency=payment.currency or None,
            payment_status=status.value,
            paid_at=payment.captured_at or now,
            created_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                payment_id=payment.payment_id,
                buyer_email=draft.buyer.email,
                seller_count=len(groups),
                transport_mode=draft.transport_mode.value,
                transport_cost=draft.transport_cost,
                total_price=draft.total_price,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def groups_in_order(self) -> list[SellerGroup]:
        return sorted(self.seller_groups, key=lambda group: group.position or 0)

    def lines_in_order(self) -> list[ProductLine]:
        return sorted(self.product_lines, key=lambda line: line.position or 0)

    def seller_group(self, seller_group_id) -> SellerGroup:
        group = next((g for g in self.seller_groups if str(g.id) == str(seller_group_id)), None)
        if group is None:
            raise ObjectNotFoundError({"seller_group_id": [f"Seller group {seller_group_id} not found in order"]})
        return group

    def product_line(self, product_line_id) -> ProductLine:
        line = next((ln for ln in self.product_lines if str(ln.id) == str(product_line_id)), None)
        if line is None:
            raise ObjectNotFoundError({"product_line_id": [f"Product line {product_line_id} not found in order"]})
        return line

    def lines_for(self, seller_group_id) -> list[ProductLine]:
        return [line for line in self.lines_in_order() if str(line.seller_group_id) == str(seller_group_id)]

    def reviews_for(self, product_line_id) -> list[LineReview]:
        reviews = [r for r in self.reviews if str(r.product_line_id) == str(product_line_id)]
        return sorted(reviews, key=lambda r: r.submitted_at)

    def seller_share(self, seller_group_id) -> float:
        """Sum of the group's line subtotals; transport is not part of any seller's share."""
        self.seller_group(seller_group_id)
        return round(math.fsum(line.subtotal for line in self.lines_for(seller_group_id)), 2)

    # -------------------------------------------------------------------
    # Shipment
    # -------------------------------------------------------------------
    def record_shipment(self, seller_group_id, shipment_id, tracking_number=None, label_url=None):
        if self.transport_mode != TransportMode.DELIVERY.value:
            raise ValidationError({"transport_mode": ["Shipments are only booked for delivery orders"]})

        group = self.seller_group(seller_group_id)
        group.shipment_id = shipment_id
        group.tracking_number = tracking_number
        group.label_url = label_url

        self.raise_(
            ShipmentBooked(
                order_id=str(self.id),
                seller_group_id=str(group.id),
                shipment_id=shipment_id,
                tracking_number=tracking_number,
                label_url=label_url,
            )
        )

    # -------------------------------------------------------------------
    # Payout
    # -------------------------------------------------------------------
    def _assert_can_transition(self, group: SellerGroup, target_status: PayoutStatus):
        """Validate that the group's payout state allows transition to target."""
        current = PayoutStatus(group.payout_status)
        if target_status not in _VALID_PAYOUT_TRANSITIONS.get(current, set()):
            raise ValidationError(
                {"payout_status": [f"Cannot transition from {current.value} to {target_status.value}"]}
            )

    def assert_payout_can_be_issued(self, seller_group_id):
        self._assert_can_transition(self.seller_group(seller_group_id), PayoutStatus.LINK_SENT)

    def record_payout_link(
        self,
        seller_group_id,
        payout_link,
        amount,
        currency,
        reference,
        source_currency,
        link_ttl_minutes,
    ):
        group = self.seller_group(seller_group_id)
        self._assert_can_transition(group, PayoutStatus.LINK_SENT)

        now = datetime.now(UTC)
        expires_at = now + timedelta(minutes=link_ttl_minutes)

        group.payout_status = PayoutStatus.LINK_SENT.value
        group.payout_link = payout_link
        group.payout_amount = amount
        group.payout_currency = currency
        group.payout_reference = reference
        group.link_sent_at = now
        group.link_expires_at = expires_at

        self.raise_(
            PayoutLinkIssued(
                order_id=str(self.id),
                seller_group_id=str(group.id),
                seller_name=group.seller.name,
                seller_email=group.seller.email,
                source_amount=self.seller_share(group.id),
                source_currency=source_currency,
                amount=amount,
                currency=currency,
                payout_link=payout_link,
                expires_at=expires_at,
            )
        )

    def confirm_payout(self, seller_group_id):
        group = self.seller_group(seller_group_id)
        self._assert_can_transition(group, PayoutStatus.PAID)

        now = datetime.now(UTC)
        group.payout_status = PayoutStatus.PAID.value
        group.paid_at = now

        self.raise_(
            PayoutConfirmed(
                order_id=str(self.id),
                seller_group_id=str(group.id),
                paid_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Reviews
    # -------------------------------------------------------------------
    def add_review(self, product_line_id, rating, reviewer_name, comment=None):
        """Append a buyer review to one product line.

        A reviewer may review a given line once; names are compared
        ignoring case and surrounding whitespace.
        """
        line = self.product_line(product_line_id)

        reviewer = " ".join(str(reviewer_name or "").split())
        if not reviewer:
            raise ValidationError({"reviewer_name": ["Reviewer name is required"]})

        already_reviewed = any(
            " ".join(r.reviewer_name.split()).casefold() == reviewer.casefold() for r in self.reviews_for(line.id)
        )
        if already_reviewed:
            raise ValidationError({"review": [f"{reviewer} has already reviewed this product"]})

        now = datetime.now(UTC)
        review = LineReview(
            product_line_id=line.id,
            rating=rating,
            comment=comment,
            reviewer_name=reviewer,
            submitted_at=now,
        )
        self.add_reviews(review)

        self.raise_(
            ReviewAdded(
                order_id=str(self.id),
                product_line_id=str(line.id),
                product_id=str(line.product_id),
                rating=rating,
                reviewer_name=reviewer,
                submitted_at=now,
            )
        )
        return review
