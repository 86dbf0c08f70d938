"""Seller notification for issued payout links.

Runs after the LINK_SENT transition is committed. A failed email is logged
and left for the operator; the payout state is not touched.
"""

import structlog
from protean.utils.mixins import handle

from notifications.channel import get_email_channel
from ordering.domain import ordering
from ordering.order.events import PayoutLinkIssued
from ordering.order.order import Order

logger = structlog.get_logger(__name__)

PAYOUT_EMAIL_SUBJECT = "Payment Link for Your Order"


def render_payout_email(event: PayoutLinkIssued) -> tuple[str, str]:
    expires = event.expires_at.strftime("%Y-%m-%d %H:%M UTC") if event.expires_at else "soon"
    body = (
        f"Hello {event.seller_name},\n\n"
        f"Your payout for order {event.order_id} is ready.\n"
        f"Amount: {event.source_currency} {event.source_amount:,.2f} "
        f"({event.currency} {event.amount:,.2f})\n\n"
        f"Collect it here: {event.payout_link}\n"
        f"This link expires at {expires}.\n"
    )
    html_body = (
        f"<p>Hello {event.seller_name},</p>"
        f"<p>Your payout for order <strong>{event.order_id}</strong> is ready.</p>"
        f"<p>Amount: {event.source_currency} {event.source_amount:,.2f} ({event.currency} {event.amount:,.2f})</p>"
        f'<p><a href="{event.payout_link}">Collect your payment</a></p>'
        f"<p>This link expires at {expires}.</p>"
    )
    return body, html_body


@ordering.event_handler(part_of=Order)
class PayoutNotifier:
    @handle(PayoutLinkIssued)
    def on_payout_link_issued(self, event: PayoutLinkIssued) -> None:
        body, html_body = render_payout_email(event)
        result = get_email_channel().send(
            to=event.seller_email,
            subject=PAYOUT_EMAIL_SUBJECT,
            body=body,
            html_body=html_body,
        )

        if result.get("status") != "sent":
            logger.warning(
                "Payout email could not be delivered",
                order_id=str(event.order_id),
                seller_group_id=str(event.seller_group_id),
                error=result.get("error"),
            )
            return

        logger.info(
            "Payout email sent",
            order_id=str(event.order_id),
            seller_group_id=str(event.seller_group_id),
            message_id=result.get("message_id"),
        )
