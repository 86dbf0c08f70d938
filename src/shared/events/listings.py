"""Cross-domain event contracts for catalogue listing decisions.

These classes define the event shape published by the catalogue service when
an operator approves a listing. They are registered as external events via
domain.register_external_event() with matching __type__ strings so Protean's
stream deserialization works correctly.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier, String


class ListingApproved(BaseEvent):
    """An operator approved a product listing for sale."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    grade = String(required=True)
    quantity = Float()
    seller_address = String()
    seller_city = String()
    image = String()
    approved_at = DateTime(required=True)
