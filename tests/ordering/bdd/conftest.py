"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.checkout.submission import place_order_command
from ordering.order.aggregation import CartLine, PartyDetails, PaymentAssertion, aggregate_cart
from ordering.order.order import Order
from payments.gateway import set_gateway
from payments.gateway.fake_adapter import FakeGateway
from protean import current_domain
from pytest_bdd import given, parsers, then


@pytest.fixture()
def gateway():
    fake = FakeGateway()
    set_gateway(fake)
    return fake


@pytest.fixture()
def cart():
    """Lines collected by Background steps before the order is placed."""
    return {"buyer": None, "lines": []}


@pytest.fixture()
def outcome():
    """Container for captured errors from When steps."""
    return {"exc": None}


def _seller(email):
    name = email.split("@")[0].title() + " Farmer"
    return PartyDetails(name=name, email=email, address="Farm Road", city="Kurunegala")


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a paid delivery order from "{buyer_email}"'))
def _(cart, buyer_email):
    cart["buyer"] = PartyDetails(name="Green Grocers", email=buyer_email, address="12 Galle Road", city="Colombo")


@given(parsers.cfparse('the order has a seller group for "{seller_email}" worth {amount:f}'))
def _(cart, seller_email, amount):
    cart["lines"].append(
        CartLine(
            product_id=f"prod-{seller_email.split('@')[0]}",
            name="Produce",
            unit_price=amount,
            quantity=1,
            seller=_seller(seller_email),
        )
    )


@pytest.fixture()
def placed_order(cart, gateway):
    draft = aggregate_cart(cart["buyer"], cart["lines"], "DELIVERY", transport_cost=1200.0)
    payment = PaymentAssertion(payment_id="PAY-BDD-1", status="COMPLETED")
    return current_domain.process(place_order_command(draft, payment), asynchronous=False)


@pytest.fixture()
def group_id_for(placed_order):
    """Look up a seller group id in the placed order by seller email."""

    def lookup(seller_email):
        order = current_domain.repository_for(Order).get(placed_order)
        return next(str(g.id) for g in order.seller_groups if g.seller.email == seller_email)

    return lookup


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the payout for "{seller_email}" is "{status}"'))
def _(placed_order, group_id_for, seller_email, status):
    order = current_domain.repository_for(Order).get(placed_order)
    assert order.seller_group(group_id_for(seller_email)).payout_status == status
