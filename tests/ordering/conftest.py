import pytest
from ordering.order.aggregation import CartLine, PartyDetails, PaymentAssertion, aggregate_cart
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield


# ---------------------------------------------------------------------------
# Cart fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def buyer():
    return PartyDetails(name="Green Grocers", email="buying@greengrocers.lk", address="12 Galle Road", city="Colombo")


@pytest.fixture()
def nimal():
    return PartyDetails(name="Nimal Perera", email="nimal@farm.lk", address="Farm Lane 4", city="Kurunegala")


@pytest.fixture()
def sara():
    return PartyDetails(name="Sara Fernando", email="sara@farm.lk", address="Hill Estate", city="Nuwara Eliya")


@pytest.fixture()
def cart_lines(nimal, sara):
    """Two lines from Nimal (1000 + 500) and one from Sara (3000)."""
    return [
        CartLine(product_id="prod-rice", name="Samba Rice", unit_price=200.0, quantity=5, seller=nimal, grade="A"),
        CartLine(product_id="prod-beans", name="Green Beans", unit_price=250.0, quantity=2, seller=nimal, grade="B"),
        CartLine(product_id="prod-leeks", name="Leeks", unit_price=300.0, quantity=10, seller=sara, grade="A"),
    ]


@pytest.fixture()
def delivery_draft(buyer, cart_lines):
    return aggregate_cart(buyer, cart_lines, "DELIVERY", transport_cost=1200.0)


@pytest.fixture()
def pickup_draft(buyer, cart_lines):
    return aggregate_cart(buyer, cart_lines, "PICKUP")


@pytest.fixture()
def payment():
    return PaymentAssertion(payment_id="PAY-0001", status="COMPLETED", method="PayPal", amount=5700.0, currency="LKR")
