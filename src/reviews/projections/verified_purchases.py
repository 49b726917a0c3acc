"""VerifiedPurchases: maps customer+product to the order that delivered it.

Populated by the OrderDelivered cross-domain event handler and consulted
by SubmitReview.
"""

from protean.fields import DateTime, Identifier, String

from reviews.domain import reviews


@reviews.projection
class VerifiedPurchases:
    vp_id = Identifier(identifier=True, required=True)
    customer_id = String(required=True)
    product_id = String(required=True)
    product_name = String()
    order_id = String(required=True)
    delivered_at = DateTime(required=True)
