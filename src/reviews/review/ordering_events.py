"""Inbound cross-domain event handler: Reviews reacts to Ordering events.

Listens for OrderDelivered events from the Ordering domain to populate
the VerifiedPurchases projection, which the SubmitReview handler checks
before accepting a review.

Cross-domain events are imported from shared.events.ordering and registered
as external events via reviews.register_external_event().
"""

import json
import uuid

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.ordering import OrderDelivered

from reviews.domain import reviews
from reviews.projections.verified_purchases import VerifiedPurchases
from reviews.review.review import Review

logger = structlog.get_logger(__name__)

# Register external event so Protean can deserialize it
reviews.register_external_event(OrderDelivered, "Ordering.OrderDelivered.v1")


@reviews.event_handler(part_of=Review, stream_category="ordering::order")
class OrderingEventsHandler:
    """Reacts to Ordering domain events to track verified purchases."""

    @handle(OrderDelivered)
    def on_order_delivered(self, event: OrderDelivered) -> None:
        """Record one verified purchase per product in the delivered order."""
        items = json.loads(event.items) if event.items else []
        if not items:
            logger.info(
                "OrderDelivered without items, no verified purchases recorded",
                order_id=str(event.order_id),
            )
            return

        vp_repo = current_domain.repository_for(VerifiedPurchases)
        for item in items:
            product_id = str(item["product_id"])

            # Redelivered events must not duplicate records
            existing = vp_repo._dao.query.filter(
                customer_id=str(event.customer_id),
                product_id=product_id,
                order_id=str(event.order_id),
            ).all()
            if existing.items:
                continue

            vp_repo.add(
                VerifiedPurchases(
                    vp_id=str(uuid.uuid4()),
                    customer_id=str(event.customer_id),
                    product_id=product_id,
                    product_name=item.get("product_name"),
                    order_id=str(event.order_id),
                    delivered_at=event.delivered_at,
                )
            )

        logger.info(
            "Verified purchases recorded",
            order_id=str(event.order_id),
            product_count=len(items),
        )
