"""PayPal payout gateway.

Creates a PayPal checkout order (intent CAPTURE) for the seller's share and
returns its ``approve`` link. ``PayPal-Request-Id`` carries the idempotency
key, so a retried request returns the order created the first time.
"""

import httpx
import structlog

from payments.gateway.port import PayoutGateway, PayoutLinkResult
from shared.config import PayoutSettings

logger = structlog.get_logger(__name__)


class PayPalGateway(PayoutGateway):
    def __init__(self, settings: PayoutSettings, transport: httpx.BaseTransport | None = None) -> None:
        self.settings = settings
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.settings.paypal_base_url,
            timeout=self.settings.timeout_seconds,
            transport=self._transport,
        )

    def _access_token(self, client: httpx.Client) -> str:
        response = client.post(
            "/v1/oauth2/token",
            data={"grant_type": "client_credentials"},
            auth=(self.settings.paypal_client_id, self.settings.paypal_client_secret.get_secret_value()),
        )
        response.raise_for_status()
        return response.json()["access_token"]

    def create_payout_link(
        self,
        amount: float,
        currency: str,
        payee_name: str,
        payee_email: str,
        reference: str,
        idempotency_key: str,
    ) -> PayoutLinkResult:
        body = {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "reference_id": reference,
                    "custom_id": reference,
                    "description": f"Payout for {payee_name} <{payee_email}>",
                    "amount": {"currency_code": currency, "value": f"{amount:.2f}"},
                }
            ],
        }

        with self._client() as client:
            try:
                token = self._access_token(client)
                response = client.post(
                    "/v2/checkout/orders",
                    json=body,
                    headers={
                        "Authorization": f"Bearer {token}",
                        "PayPal-Request-Id": idempotency_key,
                    },
                )
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as e:
                logger.error("PayPal rejected payout request", reference=reference, status_code=e.response.status_code)
                return PayoutLinkResult(
                    success=False,
                    gateway_status=str(e.response.status_code),
                    failure_reason="Payout processor rejected the request",
                )
            except (httpx.HTTPError, KeyError, ValueError) as e:
                logger.error("PayPal request failed", reference=reference, error=str(e))
                return PayoutLinkResult(success=False, failure_reason="Payout processor unavailable")

        approve = next((link["href"] for link in data.get("links", []) if link.get("rel") == "approve"), None)
        if approve is None:
            return PayoutLinkResult(
                success=False,
                gateway_reference=data.get("id"),
                gateway_status=data.get("status"),
                failure_reason="Payout processor returned no approval link",
            )

        return PayoutLinkResult(
            success=True,
            link_url=approve,
            gateway_reference=data.get("id"),
            gateway_status=data.get("status"),
        )
