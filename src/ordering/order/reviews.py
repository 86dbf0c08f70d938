"""AddReview: attach a buyer review to one product line of an order."""

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class AddReview:
    order_id = Identifier(required=True)
    product_line_id = Identifier(required=True)
    rating = Integer(required=True, min_value=1, max_value=5)
    comment = Text()
    reviewer_name = String(required=True, max_length=150)


@ordering.command_handler(part_of=Order)
class ReviewHandler:
    @handle(AddReview)
    def add_review(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        review = order.add_review(
            product_line_id=command.product_line_id,
            rating=command.rating,
            reviewer_name=command.reviewer_name,
            comment=command.comment,
        )
        repo.add(order)
        return str(review.id)
