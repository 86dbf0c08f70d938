"""Payout gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing
- PayPalGateway for production
"""

from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import PayoutGateway
from shared.config import get_settings

_current_gateway: PayoutGateway | None = None


def get_gateway() -> PayoutGateway:
    """Return the current payout gateway, chosen by ``payout.gateway``. Defaults to FakeGateway."""
    global _current_gateway
    if _current_gateway is None:
        settings = get_settings().payout
        if settings.gateway == "paypal":
            from payments.gateway.paypal_adapter import PayPalGateway

            _current_gateway = PayPalGateway(settings)
        elif settings.gateway == "fake":
            _current_gateway = FakeGateway()
        else:
            raise ValueError(f"Unknown payout gateway: {settings.gateway}")
    return _current_gateway


def set_gateway(gateway: PayoutGateway) -> None:
    """Override the active payout gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
