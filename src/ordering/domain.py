"""Ordering bounded context: multi-seller orders, payment gate and seller settlement.

Turns a paid checkout into one Order split into per-seller groups, books
deliveries, tracks each seller's payout from link issuance to receipt, and
collects buyer reviews on the purchased product lines.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
