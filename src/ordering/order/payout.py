"""Seller payout settlement: commands, handlers and the operator action.

Each seller group settles on its own: PENDING → LINK_SENT → PAID.

Issuing a payout converts the group's share to the settlement currency and
asks the payout gateway for a collectible link. Only a successful link moves
the group to LINK_SENT; a failed request leaves the group PENDING and
surfaces a ``PayoutLinkError``.
"""

import structlog
from protean import handle
from protean.exceptions import ExpectedVersionError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, PayoutStatus
from payments.conversion import to_settlement_amount
from payments.gateway import get_gateway
from shared.config import get_settings
from shared.errors import PayoutLinkError

logger = structlog.get_logger(__name__)


def payout_idempotency_key(order_id, seller_group_id) -> str:
    return f"payout-{order_id}-{seller_group_id}"


@ordering.command(part_of="Order")
class IssuePayout:
    order_id = Identifier(required=True)
    seller_group_id = Identifier(required=True)


@ordering.command(part_of="Order")
class ConfirmPayout:
    order_id = Identifier(required=True)
    seller_group_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class PayoutHandler:
    @handle(IssuePayout)
    def issue_payout(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        # The gateway is only called for PENDING groups
        order.assert_payout_can_be_issued(command.seller_group_id)

        group = order.seller_group(command.seller_group_id)
        settings = get_settings().payout
        share = order.seller_share(group.id)
        amount = to_settlement_amount(share, settings)
        reference = f"{order.id}:{group.id}"

        result = get_gateway().create_payout_link(
            amount=amount,
            currency=settings.settlement_currency,
            payee_name=group.seller.name,
            payee_email=group.seller.email,
            reference=reference,
            idempotency_key=payout_idempotency_key(order.id, group.id),
        )
        if not result.success:
            logger.warning(
                "Payout link request failed",
                order_id=str(order.id),
                seller_group_id=str(group.id),
                reason=result.failure_reason,
            )
            raise PayoutLinkError(
                result.failure_reason or "Payout link could not be created",
                order_id=str(order.id),
                seller_group_id=str(group.id),
            )

        order.record_payout_link(
            group.id,
            payout_link=result.link_url,
            amount=amount,
            currency=settings.settlement_currency,
            reference=result.gateway_reference or reference,
            source_currency=settings.source_currency,
            link_ttl_minutes=settings.link_ttl_minutes,
        )
        repo.add(order)

        logger.info(
            "Payout link issued",
            order_id=str(order.id),
            seller_group_id=str(group.id),
            share=share,
            amount=amount,
            currency=settings.settlement_currency,
        )
        return result.link_url

    @handle(ConfirmPayout)
    def confirm_payout(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.confirm_payout(command.seller_group_id)
        repo.add(order)

        logger.info("Payout confirmed", order_id=str(order.id), seller_group_id=str(command.seller_group_id))


def advance_payout(order_id: str, seller_group_id: str) -> Order:
    """Move one seller group to its next payout state and return the updated order.

    PENDING issues a payout link, LINK_SENT confirms receipt, PAID is
    terminal. A concurrent write to the same order (typically a sibling
    group being settled) is retried on fresh state; the gateway's
    idempotency key makes a repeated link request return the same link.
    """
    repo = current_domain.repository_for(Order)
    attempts = get_settings().payout.max_conflict_retries + 1

    for attempt in range(1, attempts + 1):
        order = repo.get(order_id)
        status = PayoutStatus(order.seller_group(seller_group_id).payout_status)

        if status == PayoutStatus.PENDING:
            command = IssuePayout(order_id=order_id, seller_group_id=seller_group_id)
        else:
            # LINK_SENT confirms; PAID is refused by the state machine
            command = ConfirmPayout(order_id=order_id, seller_group_id=seller_group_id)

        try:
            current_domain.process(command, asynchronous=False)
            break
        except ExpectedVersionError:
            if attempt == attempts:
                raise
            logger.info(
                "Order changed concurrently; retrying payout action",
                order_id=str(order_id),
                seller_group_id=str(seller_group_id),
                attempt=attempt,
            )

    return repo.get(order_id)
