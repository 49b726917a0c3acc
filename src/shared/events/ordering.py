"""Cross-domain event contracts for Ordering domain events.

These classes define the event shape for consumption by other domains
(the Notifications domain to alert the shop and email customers, the
Reviews domain to track verified purchases). They are registered as
external events via domain.register_external_event() with matching
__type__ strings so Protean's stream deserialization works correctly.

The source-of-truth events are in src/ordering/order/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier, String, Text


class OrderPlaced(BaseEvent):
    """A customer placed an order at checkout.

    Consumed by the Notifications domain to alert the shop about the new order.
    """

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    user_email = String(required=True)
    user_full_name = String()
    user_phone = String()
    delivery_address = String()
    delivery_city = String()
    items = Text(required=True)  # JSON list of {product_id, product_name, quantity, unit_price}
    total_amount = Float(required=True)
    payment_reference = String()
    placed_at = DateTime(required=True)


class OrderStatusChanged(BaseEvent):
    """An administrator moved an order to a new status.

    Consumed by the Notifications domain to email the customer.
    """

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    user_email = String(required=True)
    user_full_name = String()
    previous_status = String(required=True)
    new_status = String(required=True)
    tracking_number = String()
    changed_at = DateTime(required=True)


class OrderDelivered(BaseEvent):
    """An order reached the delivered state.

    Consumed by the Reviews domain to record verified purchases.
    """

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of {product_id, product_name}
    confirmation_method = String()
    delivered_at = DateTime(required=True)
