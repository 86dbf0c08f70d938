"""Fake carrier adapter: deterministic carrier for testing and development.

Generates mock shipment ids, tracking numbers and label URLs.
Configurable success/failure behavior for integration testing.
"""

from uuid import uuid4

from ordering.carrier.port import CarrierPort, ShipmentRequest


class FakeCarrier(CarrierPort):
    """Fake carrier that always succeeds by default."""

    def __init__(self):
        self.should_succeed = True
        self.failure_reason = "Carrier unavailable"
        self.failing_references: set[str] = set()
        self.requests: list[ShipmentRequest] = []

    def configure(self, should_succeed: bool = True, failure_reason: str = "Carrier unavailable"):
        """Configure the fake carrier behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def fail_for(self, reference: str):
        """Refuse only the shipment with this reference."""
        self.failing_references.add(reference)

    def create_shipment(self, request: ShipmentRequest) -> dict:
        self.requests.append(request)

        if not self.should_succeed or request.reference in self.failing_references:
            return {
                "shipment_id": None,
                "tracking_number": None,
                "label_url": None,
                "error": self.failure_reason,
            }

        shipment_id = f"ship-{uuid4().hex[:8]}"
        return {
            "shipment_id": shipment_id,
            "tracking_number": f"FAKE-{uuid4().hex[:12].upper()}",
            "label_url": f"https://fake-carrier.example.com/labels/{shipment_id}.pdf",
        }
