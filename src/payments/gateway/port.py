"""Payout gateway port (abstract interface).

Defines the contract that all payout link adapters must implement. This
enables swapping between FakeGateway (dev/test) and PayPalGateway
(production) without changing any domain or application code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class PayoutLinkResult:
    """Result of a payout link request."""

    success: bool
    link_url: str | None = None
    gateway_reference: str | None = None
    gateway_status: str | None = None
    failure_reason: str | None = None


class PayoutGateway(ABC):
    """Abstract payout gateway interface."""

    @abstractmethod
    def create_payout_link(
        self,
        amount: float,
        currency: str,
        payee_name: str,
        payee_email: str,
        reference: str,
        idempotency_key: str,
    ) -> PayoutLinkResult:
        """Request a collectible payment link for ``amount`` in ``currency``.

        Repeating a request with the same ``idempotency_key`` must not create
        a second link.
        """
        ...
