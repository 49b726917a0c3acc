"""Review aggregate: a customer's rating of a product they received.

Reviews are only accepted for products from delivered orders, so every
stored review is a verified purchase. Administrators may feature reviews
for display on the storefront.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text, ValueObject

from reviews.domain import reviews
from reviews.review.events import ReviewFeatured, ReviewSubmitted


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@reviews.value_object(part_of="Review")
class Rating:
    """A star rating from 1 to 5."""

    score = Integer(required=True)

    @invariant.post
    def score_must_be_in_range(self):
        if self.score is not None and (self.score < 1 or self.score > 5):
            raise ValidationError({"rating": ["Rating must be between 1 and 5"]})


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@reviews.aggregate
class Review:
    customer_id = Identifier(required=True)
    order_id = Identifier(required=True)
    product_id = Identifier(required=True)

    rating = ValueObject(Rating, required=True)
    review_text = Text()

    # Reviewer display details, captured at submission
    user_name = String(max_length=200)
    user_email = String(max_length=254)

    is_verified = Boolean(default=False)
    is_featured = Boolean(default=False)

    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def submit(
        cls,
        customer_id,
        order_id,
        product_id,
        rating,
        review_text=None,
        user_name=None,
        user_email=None,
        is_verified=True,
    ):
        now = datetime.now(UTC)

        review = cls(
            customer_id=customer_id,
            order_id=order_id,
            product_id=product_id,
            rating=Rating(score=rating),
            review_text=(review_text or "").strip() or None,
            user_name=user_name,
            user_email=user_email,
            is_verified=is_verified,
            is_featured=False,
            created_at=now,
            updated_at=now,
        )

        review.raise_(
            ReviewSubmitted(
                review_id=str(review.id),
                product_id=str(product_id),
                customer_id=str(customer_id),
                order_id=str(order_id),
                rating=rating,
                submitted_at=now,
            )
        )

        return review

    def feature(self, featured=True):
        """Show (or stop showing) this review on the storefront."""
        if bool(self.is_featured) == featured:
            return

        now = datetime.now(UTC)
        self.is_featured = featured
        self.updated_at = now

        self.raise_(
            ReviewFeatured(
                review_id=str(self.id),
                is_featured=featured,
                featured_at=now,
            )
        )

    def to_dict(self):
        return {
            "id": str(self.id),
            "customer_id": str(self.customer_id),
            "order_id": str(self.order_id),
            "product_id": str(self.product_id),
            "rating": self.rating.score if self.rating else None,
            "review_text": self.review_text,
            "user_name": self.user_name,
            "is_verified": bool(self.is_verified),
            "is_featured": bool(self.is_featured),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
