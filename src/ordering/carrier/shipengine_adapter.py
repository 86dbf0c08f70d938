"""ShipEngine carrier adapter.

Creates shipments with ``POST {base_url}/shipments``. ShipEngine reports
per-shipment errors inside a 200 response, so both HTTP failures and
``has_errors`` payloads come back as an ``error`` entry rather than an
exception.
"""

import httpx
import structlog

from ordering.carrier.port import CarrierPort, ShipmentAddress, ShipmentRequest
from shared.config import CarrierSettings

logger = structlog.get_logger(__name__)


def _address_payload(address: ShipmentAddress) -> dict:
    return {
        "name": address.name,
        "phone": address.phone,
        "email": address.email,
        "address_line1": address.address_line1,
        "city_locality": address.city_locality,
        "postal_code": address.postal_code,
        "country_code": address.country_code,
    }


def _failure(error: str) -> dict:
    return {"shipment_id": None, "tracking_number": None, "label_url": None, "error": error}


class ShipEngineCarrier(CarrierPort):
    def __init__(self, settings: CarrierSettings, transport: httpx.BaseTransport | None = None):
        self.settings = settings
        self._transport = transport

    def _payload(self, request: ShipmentRequest) -> dict:
        ship_from = _address_payload(request.ship_from)
        return {
            "shipments": [
                {
                    "validate_address": "no_validation",
                    "carrier_id": self.settings.carrier_id,
                    "service_code": self.settings.service_code,
                    "external_shipment_id": request.reference,
                    "ship_to": _address_payload(request.ship_to),
                    "ship_from": ship_from,
                    "return_to": ship_from,
                    "customs": {
                        "contents": self.settings.customs_contents,
                        "non_delivery": self.settings.customs_non_delivery,
                        "customs_items": [
                            {
                                "description": item.description,
                                "quantity": item.quantity,
                                "value": {"currency": item.value_currency, "amount": item.value_amount},
                                "origin_country": request.ship_from.country_code,
                            }
                            for item in request.customs_items
                        ],
                    },
                    "packages": [{"weight": {"value": request.weight_kg, "unit": "kilogram"}}],
                }
            ]
        }

    def create_shipment(self, request: ShipmentRequest) -> dict:
        headers = {"API-Key": self.settings.api_key.get_secret_value()}

        with httpx.Client(
            base_url=self.settings.base_url,
            timeout=self.settings.timeout_seconds,
            transport=self._transport,
        ) as client:
            try:
                response = client.post("/shipments", json=self._payload(request), headers=headers)
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as e:
                logger.error(
                    "Carrier rejected shipment",
                    reference=request.reference,
                    status_code=e.response.status_code,
                )
                return _failure(e.response.text)
            except httpx.HTTPError as e:
                logger.error("Carrier unreachable", reference=request.reference, error=str(e))
                return _failure(str(e))
            except ValueError as e:
                logger.error("Carrier returned an unreadable reply", reference=request.reference, error=str(e))
                return _failure("Unreadable carrier reply")

        shipments = data.get("shipments") or []
        shipment = shipments[0] if shipments else {}
        if data.get("has_errors") or not shipment.get("shipment_id"):
            errors = shipment.get("errors") or [{"message": "Carrier returned no shipment"}]
            return _failure("; ".join(str(err.get("message", err)) for err in errors))

        return {
            "shipment_id": shipment["shipment_id"],
            "tracking_number": shipment.get("tracking_number"),
            "label_url": (shipment.get("label_download") or {}).get("pdf"),
        }
