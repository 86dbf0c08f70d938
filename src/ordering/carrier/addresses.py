"""Carrier-ready shipment requests built from an Order's snapshots."""

from ordering.carrier.port import CustomsItem, ShipmentAddress, ShipmentRequest
from shared.config import CarrierSettings


def carrier_name(name: str | None, settings: CarrierSettings) -> str:
    """Carriers require a full name; single-word names fall back to a placeholder."""
    cleaned = " ".join((name or "").split())
    if len(cleaned.split(" ")) < 2:
        return settings.fallback_full_name
    return cleaned


def to_shipment_address(party, settings: CarrierSettings) -> ShipmentAddress:
    return ShipmentAddress(
        name=carrier_name(party.name, settings),
        address_line1=party.address or party.city,
        city_locality=party.city,
        postal_code=settings.default_postal_code,
        country_code=settings.country_code,
        phone=settings.default_phone,
        email=party.email,
    )


def build_shipment_request(order, seller_group, settings: CarrierSettings, currency: str) -> ShipmentRequest:
    """One shipment per seller group: from that seller to the order's buyer."""
    lines = order.lines_for(seller_group.id)
    return ShipmentRequest(
        reference=f"{order.id}:{seller_group.id}",
        ship_from=to_shipment_address(seller_group.seller, settings),
        ship_to=to_shipment_address(order.buyer, settings),
        weight_kg=settings.package_weight_kg,
        customs_items=tuple(
            CustomsItem(
                description=line.name,
                quantity=line.quantity,
                value_amount=round(line.subtotal, 2),
                value_currency=currency,
            )
            for line in lines
        ),
    )
