"""Pydantic request/response schemas for the Reviews API.

These are separate from Protean commands (anti-corruption pattern).
The API layer is the external contract; commands are internal domain concepts.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class SubmitReviewRequest(BaseModel):
    order_id: str = Field(..., alias="orderId")
    product_id: str = Field(..., alias="productId")
    rating: int
    review_text: str | None = Field(None, alias="reviewText")

    model_config = {"populate_by_name": True}


class FeatureReviewRequest(BaseModel):
    featured: bool = True


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class ReviewSchema(BaseModel):
    id: str
    order_id: str
    product_id: str
    rating: int
    review_text: str | None = None
    user_name: str | None = None
    is_verified: bool
    is_featured: bool
    created_at: str | None = None


class ReviewResponse(BaseModel):
    success: bool = True
    review: ReviewSchema
    message: str | None = None


class ReviewListResponse(BaseModel):
    reviews: list[ReviewSchema]
