"""Carrier port: abstract interface for shipping carrier integrations.

All carrier adapters must implement this interface. The domain code
programs against the port; adapters are swapped via configuration.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ShipmentAddress:
    name: str
    address_line1: str
    city_locality: str
    postal_code: str
    country_code: str
    phone: str
    email: str


@dataclass(frozen=True)
class CustomsItem:
    description: str
    quantity: int
    value_amount: float
    value_currency: str


@dataclass(frozen=True)
class ShipmentRequest:
    reference: str  # "<order_id>:<seller_group_id>"
    ship_from: ShipmentAddress
    ship_to: ShipmentAddress
    weight_kg: float
    customs_items: tuple[CustomsItem, ...] = field(default_factory=tuple)


class CarrierPort(ABC):
    """Abstract interface for carrier adapters."""

    @abstractmethod
    def create_shipment(self, request: ShipmentRequest) -> dict:
        """Create a shipment with the carrier.

        Returns:
            dict with keys: shipment_id, tracking_number, label_url, and
            ``error`` when the carrier refused or could not be reached.
        """
        ...
