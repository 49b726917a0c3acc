"""FastAPI routes for the Reviews bounded context.

Each route translates between Pydantic schemas (external contract) and
Protean commands (internal domain concepts).
"""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain
from shared.auth import AuthenticatedUser, admin_user, current_user

from reviews.api.schemas import (
    FeatureReviewRequest,
    ReviewListResponse,
    ReviewResponse,
    ReviewSchema,
    SubmitReviewRequest,
)
from reviews.review.featuring import FeatureReview
from reviews.review.review import Review
from reviews.review.submission import SubmitReview

review_router = APIRouter(prefix="/reviews", tags=["reviews"])


def _review_schema(data: dict) -> ReviewSchema:
    return ReviewSchema(**{field: data.get(field) for field in ReviewSchema.model_fields})


@review_router.get("", response_model=ReviewListResponse)
async def list_reviews(featured: bool = False) -> ReviewListResponse:
    """Verified reviews, newest first; ``?featured=true`` for the storefront picks."""
    repo = current_domain.repository_for(Review)
    query = repo._dao.query.filter(is_verified=True)
    if featured:
        query = query.filter(is_featured=True)
    results = query.order_by("-created_at").all().items
    return ReviewListResponse(reviews=[_review_schema(r.to_dict()) for r in results])


@review_router.post("", status_code=201, response_model=ReviewResponse)
async def submit_review(
    body: SubmitReviewRequest,
    user: AuthenticatedUser = Depends(current_user),
) -> ReviewResponse:
    """Review a product from one of the caller's delivered orders."""
    command = SubmitReview(
        customer_id=user.user_id,
        order_id=body.order_id,
        product_id=body.product_id,
        rating=body.rating,
        review_text=body.review_text,
        user_name=user.display_name,
        user_email=user.email,
    )
    review = current_domain.process(command, asynchronous=False)
    return ReviewResponse(review=_review_schema(review), message="Review submitted successfully")


@review_router.put("/{review_id}/feature", response_model=ReviewResponse)
async def feature_review(
    review_id: str,
    body: FeatureReviewRequest | None = None,
    admin: AuthenticatedUser = Depends(admin_user),
) -> ReviewResponse:
    """Feature or unfeature a review on the storefront."""
    command = FeatureReview(review_id=review_id, featured=body.featured if body else True)
    review = current_domain.process(command, asynchronous=False)
    return ReviewResponse(review=_review_schema(review))
