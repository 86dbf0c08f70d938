"""Order Aggregator: turns a flat multi-seller cart into an order draft.

Pure and side-effect free. Lines are grouped by seller email in the order the
sellers first appear; each group takes its seller identity from its first
line. Two lines that share an email but disagree on the seller's name,
address or city are rejected rather than silently merged.

Everything produced here is a frozen value copy, so later catalogue or
profile edits never leak into a draft (or the Order built from it).
"""

import math
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum

from ordering.order.pricing import amounts_match, compute_total_price, line_subtotal
from shared.errors import InputError, SellerIdentityConflictError, TotalMismatchError


class TransportMode(Enum):
    PICKUP = "Pickup"
    DELIVERY = "Delivery"


def parse_transport_mode(value) -> TransportMode:
    """Accept "PICKUP", "Pickup", "pick-up", "DELIVERY", ... ."""
    if isinstance(value, TransportMode):
        return value
    key = str(value or "").replace("-", "").replace("_", "").replace(" ", "").casefold()
    for mode in TransportMode:
        if mode.name.casefold() == key:
            return mode
    raise InputError(f"Unknown transport mode: {value!r}", allowed=[m.value for m in TransportMode])


def _clean(value) -> str:
    return " ".join(str(value).split()) if value is not None else ""


def _email_key(email: str) -> str:
    return _clean(email).casefold()


# ---------------------------------------------------------------------------
# Value copies
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class PartyDetails:
    """Name, email and postal location of a buyer or seller at order time."""

    name: str
    email: str
    address: str
    city: str

    def identity_key(self) -> tuple[str, ...]:
        return tuple(_clean(v).casefold() for v in (self.name, self.email, self.address, self.city))


@dataclass(frozen=True)
class CartLine:
    product_id: str
    name: str
    unit_price: float
    quantity: int
    seller: PartyDetails
    grade: str = ""
    image: str = ""

    @property
    def subtotal(self) -> float:
        return line_subtotal(self.unit_price, self.quantity)


@dataclass(frozen=True)
class SellerGroupDraft:
    seller: PartyDetails
    lines: tuple[CartLine, ...]

    @property
    def subtotal(self) -> float:
        return round(math.fsum(line.subtotal for line in self.lines), 2)


@dataclass(frozen=True)
class OrderDraft:
    buyer: PartyDetails
    seller_groups: tuple[SellerGroupDraft, ...]
    transport_mode: TransportMode
    transport_cost: float
    total_price: float

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return tuple(line for group in self.seller_groups for line in group.lines)

    def groups_payload(self) -> list[dict]:
        """JSON-ready shape of the seller groups, as carried by commands."""
        return [
            {
                "seller": asdict(group.seller),
                "lines": [
                    {
                        "product_id": line.product_id,
                        "name": line.name,
                        "unit_price": line.unit_price,
                        "quantity": line.quantity,
                        "grade": line.grade,
                        "image": line.image,
                    }
                    for line in group.lines
                ],
            }
            for group in self.seller_groups
        ]


@dataclass(frozen=True)
class PaymentAssertion:
    """What the payment processor reported for a checkout."""

    payment_id: str
    status: str
    method: str = ""
    amount: float | None = None
    currency: str = ""
    captured_at: datetime | None = None


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------
def _require_party(party: PartyDetails, role: str, required: tuple[str, ...]) -> None:
    missing = [name for name in required if not _clean(getattr(party, name))]
    if missing:
        raise InputError(f"Missing {role} details: {', '.join(missing)}", role=role, fields=missing)


def _validate_line(line: CartLine, index: int) -> None:
    if not _clean(line.product_id) or not _clean(line.name):
        raise InputError("Every cart line needs a product id and name", line=index)
    if isinstance(line.quantity, bool) or not isinstance(line.quantity, int) or line.quantity < 1:
        raise InputError("Quantity must be a whole number of at least 1", line=index)
    price = line.unit_price
    if isinstance(price, bool) or not isinstance(price, int | float) or not math.isfinite(price) or price < 0:
        raise InputError("Unit price must be a non-negative number", line=index)
    _require_party(line.seller, "seller", ("name", "email", "city"))


def _validate_transport(mode: TransportMode, cost) -> float:
    if isinstance(cost, bool) or not isinstance(cost, int | float) or not math.isfinite(cost) or cost < 0:
        raise InputError("Transport cost must be a non-negative number")
    if mode == TransportMode.PICKUP and cost != 0:
        raise InputError("Transport cost must be 0 when the buyer picks up the order")
    return float(cost)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------
def group_by_seller(lines: Iterable[CartLine]) -> tuple[SellerGroupDraft, ...]:
    groups: dict[str, tuple[PartyDetails, list[CartLine]]] = {}

    for line in lines:
        key = _email_key(line.seller.email)
        if key not in groups:
            groups[key] = (line.seller, [line])
            continue

        seller, grouped = groups[key]
        if line.seller.identity_key() != seller.identity_key():
            raise SellerIdentityConflictError(
                f"Cart lines for seller {seller.email} disagree on the seller's identity",
                seller_email=seller.email,
                product_id=line.product_id,
            )
        grouped.append(line)

    return tuple(SellerGroupDraft(seller=seller, lines=tuple(grouped)) for seller, grouped in groups.values())


def aggregate_cart(
    buyer: PartyDetails,
    lines: Iterable[CartLine],
    transport_mode,
    transport_cost: float = 0.0,
    expected_total: float | None = None,
) -> OrderDraft:
    """Build an ``OrderDraft`` from a buyer, cart lines and a transport choice.

    ``expected_total`` is the total the client displayed; when given it must
    agree with the computed total.
    """
    lines = list(lines)
    if not lines:
        raise InputError("Cart is empty")

    _require_party(buyer, "buyer", ("name", "email", "address", "city"))
    for index, line in enumerate(lines):
        _validate_line(line, index)

    mode = parse_transport_mode(transport_mode)
    cost = _validate_transport(mode, transport_cost)

    groups = group_by_seller(lines)
    total = compute_total_price(((line.unit_price, line.quantity) for line in lines), cost)

    if expected_total is not None and not amounts_match(expected_total, total):
        raise TotalMismatchError(
            "Submitted total does not match the cart",
            submitted_total=expected_total,
            computed_total=total,
        )

    return OrderDraft(
        buyer=buyer,
        seller_groups=groups,
        transport_mode=mode,
        transport_cost=cost,
        total_price=total,
    )


def draft_from_payload(
    buyer: dict,
    seller_groups: list[dict],
    transport_mode,
    transport_cost: float,
    expected_total: float | None = None,
) -> OrderDraft:
    """Rebuild (and re-validate) a draft from its JSON shape."""
    try:
        lines = [
            CartLine(
                product_id=str(line["product_id"]),
                name=line["name"],
                unit_price=line["unit_price"],
                quantity=line["quantity"],
                grade=line.get("grade") or "",
                image=line.get("image") or "",
                seller=PartyDetails(**group["seller"]),
            )
            for group in seller_groups
            for line in group["lines"]
        ]
        buyer_details = PartyDetails(**buyer)
    except (KeyError, TypeError) as e:
        raise InputError(f"Malformed order draft: {e}") from e

    return aggregate_cart(buyer_details, lines, transport_mode, transport_cost, expected_total)
