"""FastAPI routes for the Ordering domain: orders, payouts and reviews.

Handlers are plain functions and FastAPI runs them in its threadpool, since
order processing calls blocking carrier, gateway and mail clients.
"""

from fastapi import APIRouter
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    OrderListResponse,
    ReviewIdResponse,
    ReviewListResponse,
    ReviewRequest,
    ShipmentBookingResponse,
    SubmitOrderRequest,
)
from ordering.checkout.submission import submit_paid_order
from ordering.order.aggregation import CartLine, PartyDetails, PaymentAssertion, aggregate_cart
from ordering.order.payout import advance_payout
from ordering.order.queries import OrderScope, list_orders, list_product_reviews, order_view
from ordering.order.reviews import AddReview
from ordering.order.shipment import BookShipments


def _party(schema) -> PartyDetails:
    return PartyDetails(name=schema.name, email=schema.email, address=schema.address, city=schema.city)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201)
def submit_order(body: SubmitOrderRequest) -> dict:
    """Record a paid checkout.

    1. Aggregate the cart into seller groups (validates and reconciles the total)
    2. Persist through the payment gate
    3. Book shipments for delivery orders (failures do not undo the order)
    """
    lines = [
        CartLine(
            product_id=item.product_id,
            name=item.name,
            unit_price=item.unit_price,
            quantity=item.quantity,
            grade=item.grade,
            image=item.image,
            seller=_party(item.seller),
        )
        for item in body.items
    ]
    draft = aggregate_cart(
        buyer=_party(body.buyer),
        lines=lines,
        transport_mode=body.transport_mode,
        transport_cost=body.transport_cost,
        expected_total=body.total_price,
    )
    payment = PaymentAssertion(
        payment_id=(body.payment.payment_id or "").strip(),
        status=body.payment.status,
        method=body.payment.method,
        amount=body.payment.amount,
        currency=body.payment.currency,
        captured_at=body.payment.captured_at,
    )
    order = submit_paid_order(draft, payment)
    return order_view(order)


@order_router.get("", response_model=OrderListResponse)
def get_orders(role: str, identifier: str | None = None) -> OrderListResponse:
    scope = OrderScope.for_viewer(role, identifier)
    return OrderListResponse(orders=list_orders(scope))


@order_router.post("/{order_id}/payouts/{seller_group_id}/advance")
def advance_seller_payout(order_id: str, seller_group_id: str) -> dict:
    order = advance_payout(order_id, seller_group_id)
    return order_view(order)


@order_router.post("/{order_id}/shipments", response_model=ShipmentBookingResponse)
def book_order_shipments(order_id: str) -> ShipmentBookingResponse:
    result = current_domain.process(BookShipments(order_id=order_id), asynchronous=False)
    return ShipmentBookingResponse(**result)


@order_router.post("/{order_id}/lines/{product_line_id}/reviews", status_code=201, response_model=ReviewIdResponse)
def add_review(order_id: str, product_line_id: str, body: ReviewRequest) -> ReviewIdResponse:
    command = AddReview(
        order_id=order_id,
        product_line_id=product_line_id,
        rating=body.rating,
        comment=body.comment,
        reviewer_name=body.reviewer_name,
    )
    review_id = current_domain.process(command, asynchronous=False)
    return ReviewIdResponse(review_id=review_id)


# ---------------------------------------------------------------------------
# Review Router
# ---------------------------------------------------------------------------
review_router = APIRouter(prefix="/reviews", tags=["reviews"])


@review_router.get("", response_model=ReviewListResponse)
def get_reviews(product_id: str | None = None, reviewer_name: str | None = None) -> ReviewListResponse:
    return ReviewListResponse(reviews=list_product_reviews(product_id=product_id, reviewer_name=reviewer_name))
