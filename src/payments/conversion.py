"""Conversion from the marketplace currency to the payout settlement currency."""

from shared.config import PayoutSettings


def to_settlement_amount(source_amount: float, settings: PayoutSettings) -> float:
    """``source_amount`` divided by the configured rate, rounded to cents."""
    return round(source_amount / settings.conversion_rate, 2)
