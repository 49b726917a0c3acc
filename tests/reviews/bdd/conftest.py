"""Shared BDD fixtures and step definitions for the Reviews domain."""

import json
from datetime import UTC, datetime

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from reviews.review.ordering_events import OrderingEventsHandler
from reviews.review.review import Review
from shared.events.ordering import OrderDelivered


@pytest.fixture()
def customer_id():
    return "cust-bdd"


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('order "{order_id}" with "{product_id}" was delivered to the customer'))
def order_delivered(customer_id, order_id, product_id):
    OrderingEventsHandler().on_order_delivered(
        OrderDelivered(
            order_id=order_id,
            customer_id=customer_id,
            items=json.dumps([{"product_id": product_id, "product_name": product_id}]),
            delivered_at=datetime.now(UTC),
        )
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the review is rejected with a validation error")
def review_rejected(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse('the rejection mentions "{field}"'))
def rejection_mentions(error, field):
    assert field in error["exc"].messages


@then(parsers.re(r'the product "(?P<product_id>[^"]+)" has (?P<count>\d+) reviews?'), converters={"count": int})
def product_has_reviews(product_id, count):
    reviews = current_domain.repository_for(Review)._dao.query.filter(product_id=product_id).all().items
    assert len(reviews) == count
