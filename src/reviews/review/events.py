"""Domain events for the Review aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer

from reviews.domain import reviews


@reviews.event(part_of="Review")
class ReviewSubmitted:
    """A customer reviewed a product from a delivered order."""

    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    order_id = Identifier(required=True)
    rating = Integer(required=True)
    submitted_at = DateTime(required=True)


@reviews.event(part_of="Review")
class ReviewFeatured:
    """An administrator featured or unfeatured a review on the storefront."""

    __version__ = 1

    review_id = Identifier(required=True)
    is_featured = Boolean(required=True)
    featured_at = DateTime(required=True)
