"""Order total formula, shared by cart aggregation and the Order invariant."""

import math
from collections.abc import Iterable

MONEY_TOLERANCE = 0.005


def line_subtotal(unit_price: float, quantity: int) -> float:
    return unit_price * quantity


def compute_total_price(lines: Iterable[tuple[float, int]], transport_cost: float) -> float:
    """Σ unit_price × quantity over every line, plus the transport cost.

    ``math.fsum`` keeps the result independent of the order lines are
    visited in, so regrouping a cart never changes its total.
    """
    subtotal = math.fsum(line_subtotal(price, quantity) for price, quantity in lines)
    return round(subtotal + (transport_cost or 0.0), 2)


def amounts_match(a: float, b: float) -> bool:
    return abs(a - b) < MONEY_TOLERANCE
