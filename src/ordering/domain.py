"""Ordering bounded context: shopping carts, orders and delivery.

Owns the remote shopping cart, order placement from a cart, the admin
status workflow, delivery confirmation codes and the customer records
derived from placed orders.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
