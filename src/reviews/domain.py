"""Reviews bounded context: customer reviews of delivered products.

Customers review products from orders that reached the delivered state.
Integrates with the Ordering domain for verified purchase tracking via
cross-domain events; the shop features selected reviews on the storefront.
"""

import structlog
from protean.domain import Domain

reviews = Domain(name="reviews")

logger = structlog.get_logger(__name__)
