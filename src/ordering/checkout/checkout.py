"""Checkout: hosted payment first, order placement on success.

Checkout validates the delivery details and the cart, then sets up a hosted
payment for the cart total. When the gateway reports success the order is
placed, using the payment reference as idempotency key so a repeated success
notification cannot create a second order, and the local cart is emptied.
If the customer closes the payment window nothing is created and the cart is
left untouched.
"""

import os
import secrets

import structlog
from payments.gateway import get_gateway
from payments.gateway.port import PaymentGateway, PaymentHandle, PaymentResponse
from protean.exceptions import ValidationError

from ordering.cart.store import CartStore
from ordering.order.order import validate_delivery_details
from ordering.order.placement import OrderService

logger = structlog.get_logger(__name__)

CURRENCY = "GHS"


def generate_reference():
    return f"PG_{secrets.randbelow(1_000_000_000) + 1}"


def to_minor_units(amount):
    return int(round(amount * 100))


class Checkout:
    def __init__(
        self,
        cart: CartStore,
        gateway: PaymentGateway | None = None,
        order_service: OrderService | None = None,
        public_key: str | None = None,
        currency: str = CURRENCY,
    ) -> None:
        self.cart = cart
        self.gateway = gateway or get_gateway()
        self.order_service = order_service or OrderService()
        self.public_key = public_key if public_key is not None else os.environ.get("PAYSTACK_PUBLIC_KEY", "")
        self.currency = currency
        self.order = None

    def start(self, delivery_details: dict) -> PaymentHandle:
        """Validate the checkout and set up the hosted payment.

        The returned handle has not been opened yet.
        """
        if not self.cart.is_authenticated:
            raise ValidationError({"customer": ["Please sign in to place an order"]})
        if not self.cart.items:
            raise ValidationError({"items": ["Cart is empty"]})

        details = validate_delivery_details(delivery_details)
        amount_minor_units = to_minor_units(self.cart.total_amount)
        if amount_minor_units <= 0:
            raise ValidationError({"total_amount": ["Order total must be greater than zero"]})

        customer_id = self.cart.customer_id
        items = [line.to_dict() for line in self.cart.items]
        reference = generate_reference()

        def on_success(response: PaymentResponse):
            return self._place_order(customer_id, items, details, response)

        def on_close():
            logger.info("Payment window closed, no order placed", reference=reference, customer_id=customer_id)

        logger.info(
            "Starting checkout",
            reference=reference,
            customer_id=customer_id,
            amount_minor_units=amount_minor_units,
            currency=self.currency,
        )
        return self.gateway.setup(
            key=self.public_key,
            email=details["email"],
            amount_minor_units=amount_minor_units,
            currency=self.currency,
            reference=reference,
            metadata={
                "customer_name": details["full_name"],
                "customer_phone": details["phone"],
                "delivery_address": details["address"],
                "delivery_city": details["city"],
            },
            callback=on_success,
            on_close=on_close,
        )

    def _place_order(self, customer_id, items, details, response: PaymentResponse):
        order = self.order_service.create_order(
            customer_id,
            items,
            details,
            payment_reference=response.reference,
            idempotency_key=response.reference,
        )
        if order is None:
            logger.error("Payment succeeded but the order could not be placed", reference=response.reference)
            return None

        self.cart.clear_on_order_success()
        self.order = order
        return order
