"""Tests for the Review aggregate and the Rating value object."""

import pytest
from protean.exceptions import ValidationError
from reviews.review.events import ReviewFeatured, ReviewSubmitted
from reviews.review.review import Rating, Review


def _review(**overrides):
    values = {
        "customer_id": "cust-001",
        "order_id": "ord-001",
        "product_id": "jasmine-5kg",
        "rating": 5,
        "review_text": "Fluffy and fragrant, cooks perfectly.",
        "user_name": "Ama",
        "user_email": "ama@example.com",
    }
    values.update(overrides)
    return Review.submit(**values)


class TestRating:
    @pytest.mark.parametrize("score", [1, 3, 5])
    def test_valid_scores(self, score):
        assert Rating(score=score).score == score

    @pytest.mark.parametrize("score", [0, 6, -1])
    def test_out_of_range(self, score):
        with pytest.raises(ValidationError) as exc:
            Rating(score=score)
        assert "rating" in exc.value.messages


class TestReviewSubmission:
    def test_submit(self):
        review = _review()
        assert review.rating.score == 5
        assert review.is_verified is True
        assert review.is_featured is False
        assert review.created_at is not None

    def test_submit_raises_event(self):
        review = _review(rating=4)
        [event] = review._events
        assert isinstance(event, ReviewSubmitted)
        assert event.review_id == str(review.id)
        assert event.rating == 4

    def test_blank_text_is_dropped(self):
        assert _review(review_text="   ").review_text is None

    def test_text_is_optional(self):
        assert _review(review_text=None).review_text is None

    def test_invalid_rating(self):
        with pytest.raises(ValidationError):
            _review(rating=7)


class TestFeaturing:
    def test_feature(self):
        review = _review()
        review._events.clear()
        review.feature()
        assert review.is_featured is True
        [event] = review._events
        assert isinstance(event, ReviewFeatured)
        assert event.is_featured is True

    def test_unfeature(self):
        review = _review()
        review.feature()
        review.feature(featured=False)
        assert review.is_featured is False

    def test_featuring_twice_is_a_noop(self):
        review = _review()
        review.feature()
        review._events.clear()
        review.feature()
        assert review._events == []


class TestToDict:
    def test_to_dict(self):
        review = _review()
        data = review.to_dict()
        assert data["id"] == str(review.id)
        assert data["rating"] == 5
        assert data["product_id"] == "jasmine-5kg"
        assert data["is_verified"] is True
        assert "user_email" not in data
