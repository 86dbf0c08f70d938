"""Notifications bounded context: listing announcements for interested buyers.

When a catalogue listing is approved, every buyer whose grade preferences
match the product's grade receives one in-app notification for it, no
matter how often the approval is repeated. Also hosts the email channel
used to reach sellers about their payouts.
"""

import structlog
from protean.domain import Domain

notifications = Domain(name="notifications")

logger = structlog.get_logger(__name__)
