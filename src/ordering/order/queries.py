"""Read side for orders and reviews.

Listing orders goes through one query contract, ``list_orders(scope)``.
An ``OrderScope`` says which orders a viewer may see and which seller groups
of those orders are visible to them:

- admin: every order, every group;
- seller: orders holding one of their groups, showing only their groups;
- buyer: their own orders, every group.

Emails are matched ignoring case and surrounding whitespace.
"""

from dataclasses import dataclass
from enum import Enum

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from ordering.order.order import Order, SellerGroup


class ViewerRole(Enum):
    ADMIN = "admin"
    SELLER = "seller"
    BUYER = "buyer"


def _norm(value: str | None) -> str:
    return (value or "").strip().casefold()


@dataclass(frozen=True)
class OrderScope:
    role: ViewerRole
    identifier: str = ""

    @classmethod
    def for_viewer(cls, role: str, identifier: str | None = None) -> "OrderScope":
        try:
            viewer_role = ViewerRole(_norm(role))
        except ValueError:
            raise ValidationError(
                {"role": [f"Unknown role '{role}'; expected one of {', '.join(r.value for r in ViewerRole)}"]}
            ) from None

        if viewer_role != ViewerRole.ADMIN and not _norm(identifier):
            raise ValidationError({"identifier": [f"An identifier is required for the {viewer_role.value} role"]})
        return cls(role=viewer_role, identifier=_norm(identifier))

    def visible_groups(self, order: Order) -> list[SellerGroup]:
        groups = order.groups_in_order()
        if self.role == ViewerRole.SELLER:
            return [group for group in groups if _norm(group.seller.email) == self.identifier]
        return groups

    def admits(self, order: Order) -> bool:
        if self.role == ViewerRole.ADMIN:
            return True
        if self.role == ViewerRole.BUYER:
            return _norm(order.buyer.email) == self.identifier
        return bool(self.visible_groups(order))


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------
def _party_view(party) -> dict:
    return {"name": party.name, "email": party.email, "address": party.address, "city": party.city}


def _review_view(review) -> dict:
    return {
        "review_id": str(review.id),
        "rating": review.rating,
        "comment": review.comment,
        "reviewer_name": review.reviewer_name,
        "submitted_at": review.submitted_at.isoformat() if review.submitted_at else None,
    }


def _line_view(order: Order, line) -> dict:
    return {
        "product_line_id": str(line.id),
        "product_id": str(line.product_id),
        "name": line.name,
        "unit_price": line.unit_price,
        "quantity": line.quantity,
        "subtotal": round(line.subtotal, 2),
        "grade": line.grade,
        "image": line.image,
        "reviews": [_review_view(review) for review in order.reviews_for(line.id)],
    }


def _group_view(order: Order, group: SellerGroup) -> dict:
    return {
        "seller_group_id": str(group.id),
        "seller": _party_view(group.seller),
        "subtotal": order.seller_share(group.id),
        "payout_status": group.payout_status,
        "payout_amount": group.payout_amount,
        "payout_currency": group.payout_currency,
        "payout_link": group.payout_link,
        "shipment_id": group.shipment_id,
        "tracking_number": group.tracking_number,
        "product_lines": [_line_view(order, line) for line in order.lines_for(group.id)],
    }


def order_view(order: Order, scope: OrderScope | None = None) -> dict:
    """JSON-ready representation of an order, limited to what ``scope`` may see."""
    groups = scope.visible_groups(order) if scope else order.groups_in_order()
    return {
        "order_id": str(order.id),
        "buyer": _party_view(order.buyer),
        "seller_groups": [_group_view(order, group) for group in groups],
        "transport_mode": order.transport_mode,
        "transport_cost": order.transport_cost,
        "total_price": order.total_price,
        "payment": {
            "payment_id": order.payment_id,
            "method": order.payment_method,
            "amount": order.payment_amount,
            "currency": order.payment_currency,
            "status": order.payment_status,
            "captured_at": order.paid_at.isoformat() if order.paid_at else None,
        },
        "created_at": order.created_at.isoformat() if order.created_at else None,
    }


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
def list_orders(scope: OrderScope) -> list[dict]:
    """Orders visible to ``scope``, newest first."""
    orders = current_domain.repository_for(Order).newest_first()
    return [order_view(order, scope) for order in orders if scope.admits(order)]


def list_product_reviews(product_id: str | None = None, reviewer_name: str | None = None) -> list[dict]:
    """Reviewed product lines, optionally narrowed to one product and/or one reviewer.

    Lines without a matching review are left out.
    """
    reviewer = _norm(reviewer_name)
    entries = []

    for order in current_domain.repository_for(Order).newest_first():
        for line in order.lines_in_order():
            if product_id and str(line.product_id) != str(product_id):
                continue

            reviews = order.reviews_for(line.id)
            if reviewer:
                reviews = [r for r in reviews if _norm(r.reviewer_name) == reviewer]
            if not reviews:
                continue

            entries.append(
                {
                    "order_id": str(order.id),
                    "product_line_id": str(line.id),
                    "product_id": str(line.product_id),
                    "product_name": line.name,
                    "reviews": [_review_view(review) for review in reviews],
                }
            )
    return entries
