"""Domain events for the Order aggregate.

Events are versioned, immutable facts. ``OrderPlaced``, ``OrderStatusChanged``
and ``OrderDelivered`` are consumed by other domains through the matching
contracts in ``shared.events.ordering``.
"""

from protean.fields import DateTime, Float, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order at checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    user_email = String(required=True)
    user_full_name = String()
    user_phone = String()
    delivery_address = String()
    delivery_city = String()
    items = Text(required=True)  # JSON: list of {product_id, product_name, quantity, unit_price, weight_label}
    total_amount = Float(required=True)
    payment_reference = String()
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """The order moved to a new status."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    user_email = String(required=True)
    user_full_name = String()
    previous_status = String(required=True)
    new_status = String(required=True)
    tracking_number = String()
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDelivered:
    """The order reached the delivered state."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, product_name}
    confirmation_method = String()
    delivered_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PaymentRecorded:
    """The payment gateway confirmed the charge for an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_reference = String(required=True)
    amount = Float()
    recorded_at = DateTime(required=True)
