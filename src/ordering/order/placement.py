"""Order placement: command, handler and the OrderService facade.

Placement is a single unit of work: the order header, its line items, the
conversion of the customer's active cart and the customer record commit or
fail together. Delivery-code issuance runs afterwards and is best-effort.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart, find_active_cart
from ordering.customer.management import upsert_customer
from ordering.delivery.codes import GenerateDeliveryCode
from ordering.delivery.confirmation import outstanding_confirmations
from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, product_name, unit_price, quantity, weight_label}
    full_name = String(max_length=255)
    email = String(max_length=255)
    phone = String(max_length=30)
    whatsapp_number = String(max_length=30)
    address = Text()
    city = String(max_length=100)
    notes = Text()
    payment_reference = String(max_length=100)
    idempotency_key = String(max_length=100)


def find_order_by_idempotency_key(key):
    repo = current_domain.repository_for(Order)
    orders = repo._dao.query.filter(idempotency_key=key).all().items
    return repo.get(orders[0].id) if orders else None


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        if command.idempotency_key:
            existing = find_order_by_idempotency_key(command.idempotency_key)
            if existing is not None:
                if str(existing.customer_id) != str(command.customer_id):
                    logger.warning(
                        "Idempotency key belongs to another customer",
                        idempotency_key=command.idempotency_key,
                        customer_id=str(command.customer_id),
                    )
                    raise ValidationError({"idempotency_key": ["Idempotency key already used"]})
                logger.info(
                    "Order already placed for idempotency key",
                    order_id=str(existing.id),
                    idempotency_key=command.idempotency_key,
                )
                return str(existing.id)

        items = json.loads(command.items) if isinstance(command.items, str) else command.items

        order = Order.create(
            customer_id=command.customer_id,
            items_data=items,
            delivery_details={
                "full_name": command.full_name,
                "email": command.email,
                "phone": command.phone,
                "whatsapp_number": command.whatsapp_number,
                "address": command.address,
                "city": command.city,
                "notes": command.notes,
            },
            payment_reference=command.payment_reference,
            idempotency_key=command.idempotency_key,
        )
        current_domain.repository_for(Order).add(order)

        cart = find_active_cart(command.customer_id)
        if cart is not None:
            cart.convert(order_id=order.id)
            current_domain.repository_for(ShoppingCart).add(cart)

        upsert_customer(
            customer_id=command.customer_id,
            email=order.user_email,
            full_name=order.user_full_name,
            phone=order.user_phone,
        )

        logger.info(
            "Order placed",
            order_id=str(order.id),
            customer_id=str(command.customer_id),
            total_amount=order.total_amount,
            item_count=len(order.items),
        )
        return str(order.id)


class OrderService:
    """Entry point used by checkout and the HTTP layer to place orders."""

    def place_order(self, customer_id, items, delivery_details, payment_reference=None, idempotency_key=None):
        """Place an order and return it. Raises ValidationError on invalid input."""
        order_id = current_domain.process(
            PlaceOrder(
                customer_id=customer_id,
                items=json.dumps(items),
                full_name=delivery_details.get("full_name"),
                email=delivery_details.get("email"),
                phone=delivery_details.get("phone"),
                whatsapp_number=delivery_details.get("whatsapp_number"),
                address=delivery_details.get("address"),
                city=delivery_details.get("city"),
                notes=delivery_details.get("notes"),
                payment_reference=payment_reference,
                idempotency_key=idempotency_key,
            ),
            asynchronous=False,
        )

        self.issue_delivery_code(order_id, customer_id)
        return current_domain.repository_for(Order).get(order_id)

    def create_order(self, customer_id, items, delivery_details, payment_reference=None, idempotency_key=None):
        """Place an order, returning None instead of raising when placement fails."""
        try:
            return self.place_order(
                customer_id,
                items,
                delivery_details,
                payment_reference=payment_reference,
                idempotency_key=idempotency_key,
            )
        except ValidationError as exc:
            logger.warning("Order rejected", customer_id=str(customer_id), errors=exc.messages)
        except Exception as exc:
            logger.error("Order placement failed", customer_id=str(customer_id), error=str(exc), exc_info=exc)
        return None

    def issue_delivery_code(self, order_id, customer_id):
        """Best-effort: a failure is logged and never affects the placed order."""
        try:
            existing = outstanding_confirmations(order_id=str(order_id))
            if existing:
                return existing[0].confirmation_code
            return current_domain.process(
                GenerateDeliveryCode(order_id=order_id, customer_id=customer_id),
                asynchronous=False,
            )
        except Exception as exc:
            logger.warning("Failed to issue delivery code", order_id=str(order_id), error=str(exc))
            return None
