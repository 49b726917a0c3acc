"""FeatureReview: pick reviews to show on the storefront."""

from protean.fields import Boolean, Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviews.domain import reviews
from reviews.review.review import Review


@reviews.command(part_of="Review")
class FeatureReview:
    review_id = Identifier(required=True)
    featured = Boolean(default=True)


@reviews.command_handler(part_of=Review)
class FeatureReviewHandler:
    @handle(FeatureReview)
    def feature_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)
        review.feature(featured=bool(command.featured))
        repo.add(review)
        return review.to_dict()
