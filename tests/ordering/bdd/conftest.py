"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.events import CartCleared, CartConverted, CartItemAdded, CartItemRemoved, CartQuantityUpdated, CartReplaced
from ordering.order.order import Order
from ordering.order.placement import OrderService
from ordering.order.status import UpdateOrderStatus
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

_CART_EVENT_CLASSES = {
    "CartItemAdded": CartItemAdded,
    "CartQuantityUpdated": CartQuantityUpdated,
    "CartItemRemoved": CartItemRemoved,
    "CartCleared": CartCleared,
    "CartReplaced": CartReplaced,
    "CartConverted": CartConverted,
}


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def customer_id():
    return "cust-bdd-001"


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def delivery_details():
    return {
        "full_name": "Akosua Boateng",
        "email": "akosua@example.com",
        "phone": "0271234567",
        "address": "7 Oxford Street, Osu",
        "city": "Accra",
    }


# ---------------------------------------------------------------------------
# Given steps: Cart
# ---------------------------------------------------------------------------
@given("an active cart", target_fixture="cart")
def active_cart(customer_id):
    return ShoppingCart.create(customer_id=customer_id)


@given(parsers.cfparse('the cart holds {qty:d} of "{product_id}" at {price:f}'), target_fixture="cart")
def cart_holds(cart, qty, product_id, price):
    cart.add_item(product_id=product_id, unit_price=price, quantity=qty)
    cart._events.clear()
    return cart


# ---------------------------------------------------------------------------
# Given steps: Order
# ---------------------------------------------------------------------------
@given("a customer placed an order", target_fixture="order")
def placed_order(customer_id, delivery_details):
    items = [
        {"product_id": "jasmine-5kg", "product_name": "Jasmine Rice", "unit_price": 120.0, "quantity": 1},
        {"product_id": "shea-500g", "product_name": "Shea Butter", "unit_price": 35.0, "quantity": 2},
    ]
    return OrderService().place_order(customer_id, items, delivery_details)


@given(parsers.cfparse('the order was moved to "{status}"'), target_fixture="order")
def order_moved_to(order, status):
    current_domain.process(UpdateOrderStatus(order_id=str(order.id), status=status), asynchronous=False)
    return current_domain.repository_for(Order).get(order.id)


# ---------------------------------------------------------------------------
# Then steps: Cart
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart has {count:d} lines"))
def cart_has_lines(cart, count):
    assert len(cart.items) == count


@then(parsers.cfparse('the cart total is {amount:f}'))
def cart_total_is(cart, amount):
    assert cart.total_amount == pytest.approx(amount)


@then("the cart action fails with a validation error")
def cart_action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("a {event_type} cart event is raised"))
def cart_event_raised(cart, event_type):
    event_cls = _CART_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in cart._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in cart._events]}"


# ---------------------------------------------------------------------------
# Then steps: Order
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    stored = current_domain.repository_for(Order).get(order.id)
    assert stored.status == status


@then("the order action fails with a validation error")
def order_action_fails(error):
    assert isinstance(error["exc"], ValidationError)
