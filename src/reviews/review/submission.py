"""SubmitReview: review a product from a delivered order.

The customer must have received the product in the named order (checked
against the VerifiedPurchases projection) and may review each product
only once.
"""

import structlog
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviews.domain import reviews
from reviews.projections.verified_purchases import VerifiedPurchases
from reviews.review.review import Review

logger = structlog.get_logger(__name__)


@reviews.command(part_of="Review")
class SubmitReview:
    customer_id = Identifier(required=True)
    order_id = Identifier(required=True)
    product_id = Identifier(required=True)
    rating = Integer(required=True)
    review_text = Text()
    user_name = String(max_length=200)
    user_email = String(max_length=254)


@reviews.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        if command.rating < 1 or command.rating > 5:
            raise ValidationError({"rating": ["Rating must be between 1 and 5"]})

        vp_repo = current_domain.repository_for(VerifiedPurchases)
        purchases = vp_repo._dao.query.filter(
            customer_id=str(command.customer_id),
            product_id=str(command.product_id),
            order_id=str(command.order_id),
        ).all()
        if not purchases.items:
            raise ValidationError({"order_id": ["You can only review products from your delivered orders"]})

        # One review per customer per product
        repo = current_domain.repository_for(Review)
        existing = repo._dao.query.filter(
            customer_id=str(command.customer_id),
            product_id=str(command.product_id),
        ).all()
        if existing.items:
            raise ValidationError({"review": ["You have already reviewed this product"]})

        review = Review.submit(
            customer_id=command.customer_id,
            order_id=command.order_id,
            product_id=command.product_id,
            rating=command.rating,
            review_text=command.review_text,
            user_name=command.user_name,
            user_email=command.user_email,
            is_verified=True,
        )
        repo.add(review)

        logger.info(
            "Review submitted",
            review_id=str(review.id),
            product_id=str(command.product_id),
            rating=command.rating,
        )
        return review.to_dict()
