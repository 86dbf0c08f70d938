"""Repository for the Order aggregate."""

from ordering.domain import ordering
from ordering.order.order import Order
from shared.paging import each_item


@ordering.repository(part_of=Order)
class OrderRepository:
    """Order lookups beyond get/add."""

    def find_by_payment_id(self, payment_id: str) -> Order | None:
        """The order recorded for an external payment, if any."""
        orders = self._dao.query.filter(payment_id=payment_id).limit(1).all().items
        return orders[0] if orders else None

    def newest_first(self) -> list[Order]:
        """Every order, newest first."""
        return list(each_item(self._dao.query.order_by("-created_at")))
