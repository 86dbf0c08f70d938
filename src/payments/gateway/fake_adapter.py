"""Configurable fake payout gateway for development and testing.

This adapter simulates a payout processor without any external calls.
It can be configured at runtime to succeed or fail, and it honours
idempotency keys the way a real processor does: the same key always
yields the same link.
"""

from uuid import uuid4

from payments.gateway.port import PayoutGateway, PayoutLinkResult


class FakeGateway(PayoutGateway):
    """Configurable fake payout gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Payout processor unavailable"
        self.calls: list[dict] = []
        self._issued: dict[str, PayoutLinkResult] = {}

    def configure(self, should_succeed: bool, failure_reason: str = "Payout processor unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_payout_link(
        self,
        amount: float,
        currency: str,
        payee_name: str,
        payee_email: str,
        reference: str,
        idempotency_key: str,
    ) -> PayoutLinkResult:
        call = {
            "method": "create_payout_link",
            "amount": amount,
            "currency": currency,
            "payee_name": payee_name,
            "payee_email": payee_email,
            "reference": reference,
            "idempotency_key": idempotency_key,
        }
        self.calls.append(call)

        if not self.should_succeed:
            return PayoutLinkResult(
                success=False,
                gateway_status="failed",
                failure_reason=self.failure_reason,
            )

        if idempotency_key not in self._issued:
            gateway_reference = f"fake_payout_{uuid4().hex[:12]}"
            self._issued[idempotency_key] = PayoutLinkResult(
                success=True,
                link_url=f"https://pay.fake-gateway.example.com/checkout?token={gateway_reference}",
                gateway_reference=gateway_reference,
                gateway_status="CREATED",
            )
        return self._issued[idempotency_key]
