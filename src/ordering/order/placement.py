"""Order placement: the payment and persistence gate.

An order is written only for a completed payment with an external payment
id, and only once per payment id. The draft is re-aggregated from the
command payload so the persisted total is always the formula's total, never
one taken on trust.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.aggregation import PaymentAssertion, draft_from_payload
from ordering.order.order import Order, PaymentStatus, parse_payment_status
from shared.errors import DuplicatePaymentError

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    buyer = Text(required=True)  # JSON: {name, email, address, city}
    seller_groups = Text(required=True)  # JSON: [{seller: {...}, lines: [...]}]
    transport_mode = String(required=True)
    transport_cost = Float(default=0.0)
    total_price = Float()  # Client-side total, reconciled against the computed one

    payment_id = String(max_length=255)
    payment_status = String(required=True)
    payment_method = String(max_length=50)
    payment_amount = Float()
    payment_currency = String(max_length=3)
    captured_at = DateTime()


def _assert_payment_completed(command: PlaceOrder) -> None:
    if parse_payment_status(command.payment_status) != PaymentStatus.COMPLETED:
        message = f"Payment is {command.payment_status}; only completed payments can be recorded"
        raise ValidationError({"payment_status": [message]})
    if not (command.payment_id or "").strip():
        raise ValidationError({"payment_id": ["Payment id is required"]})


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        _assert_payment_completed(command)
        payment_id = command.payment_id.strip()

        repo = current_domain.repository_for(Order)
        existing = repo.find_by_payment_id(payment_id)
        if existing is not None:
            logger.warning("Duplicate payment submission rejected", payment_id=payment_id, order_id=str(existing.id))
            raise DuplicatePaymentError(
                f"Payment {payment_id} has already been recorded",
                payment_id=payment_id,
                order_id=str(existing.id),
            )

        buyer = json.loads(command.buyer) if isinstance(command.buyer, str) else command.buyer
        seller_groups = (
            json.loads(command.seller_groups) if isinstance(command.seller_groups, str) else command.seller_groups
        )
        draft = draft_from_payload(
            buyer=buyer,
            seller_groups=seller_groups,
            transport_mode=command.transport_mode,
            transport_cost=command.transport_cost or 0.0,
            expected_total=command.total_price,
        )

        payment = PaymentAssertion(
            payment_id=payment_id,
            status=command.payment_status,
            method=command.payment_method or "",
            amount=command.payment_amount,
            currency=command.payment_currency or "",
            captured_at=command.captured_at,
        )
        order = Order.place(draft, payment)
        repo.add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            payment_id=payment_id,
            seller_groups=len(draft.seller_groups),
            total_price=order.total_price,
        )
        return str(order.id)
