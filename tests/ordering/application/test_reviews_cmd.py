"""Application tests for AddReview."""

import pytest
from ordering.checkout.submission import place_order_command
from ordering.order.order import Order
from ordering.order.reviews import AddReview
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


@pytest.fixture()
def order(delivery_draft, payment):
    order_id = current_domain.process(place_order_command(delivery_draft, payment), asynchronous=False)
    return current_domain.repository_for(Order).get(order_id)


def _review(order_id, line_id, reviewer="Green Grocers", rating=5, comment="Crisp and fresh"):
    return current_domain.process(
        AddReview(
            order_id=order_id,
            product_line_id=line_id,
            rating=rating,
            comment=comment,
            reviewer_name=reviewer,
        ),
        asynchronous=False,
    )


class TestAddReview:
    def test_review_is_persisted(self, order):
        line_id = str(order.lines_in_order()[0].id)
        review_id = _review(str(order.id), line_id)

        stored = current_domain.repository_for(Order).get(order.id)
        [review] = stored.reviews_for(line_id)
        assert str(review.id) == review_id
        assert review.comment == "Crisp and fresh"

    def test_reviews_append(self, order):
        line_id = str(order.lines_in_order()[0].id)
        _review(str(order.id), line_id, reviewer="Alice")
        _review(str(order.id), line_id, reviewer="Bob", rating=3)

        stored = current_domain.repository_for(Order).get(order.id)
        assert [r.rating for r in stored.reviews_for(line_id)] == [5, 3]

    def test_duplicate_reviewer_is_rejected(self, order):
        line_id = str(order.lines_in_order()[0].id)
        _review(str(order.id), line_id, reviewer="Alice")
        with pytest.raises(ValidationError):
            _review(str(order.id), line_id, reviewer="ALICE")

    def test_missing_order_is_not_found(self):
        with pytest.raises(ObjectNotFoundError):
            _review("no-such-order", "no-such-line")

    def test_missing_line_is_not_found(self, order):
        with pytest.raises(ObjectNotFoundError):
            _review(str(order.id), "no-such-line")

        stored = current_domain.repository_for(Order).get(order.id)
        assert stored.reviews == []
        assert stored._version == order._version

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, order, rating):
        with pytest.raises(ValidationError):
            _review(str(order.id), str(order.lines_in_order()[0].id), rating=rating)
