"""Order aggregate (CQRS): a placed, priced and tracked purchase.

Orders are created from a cart at checkout and never deleted. Line items are
denormalized copies of the cart lines (name, price, weight) and are immutable
once the order exists.

State Machine:
    PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED
    CANCELLED (from PENDING, CONFIRMED)
"""

import json
import re
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from ordering.domain import ordering
from ordering.order.events import OrderDelivered, OrderPlaced, OrderStatusChanged, PaymentRecorded


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"


class DeliveryConfirmationMethod(Enum):
    CUSTOMER_CODE = "customer_code"
    ADMIN = "admin"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# Orders a customer may confirm as received with their delivery code
_CUSTOMER_CONFIRMABLE = {OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.SHIPPED}

# Statuses counted as "still in progress" in customer statistics
OPEN_STATUSES = {OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.SHIPPED}

PHONE_PATTERN = re.compile(r"^\+?[0-9]{10,15}$")
EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")


# ---------------------------------------------------------------------------
# Delivery details validation
# ---------------------------------------------------------------------------
def normalize_phone(phone):
    return re.sub(r"\s", "", phone or "")


def validate_delivery_details(details):
    """Validate checkout contact and delivery fields.

    Returns a normalized copy of ``details``; raises ValidationError listing
    every invalid field.
    """
    errors = {}

    full_name = (details.get("full_name") or "").strip()
    if not full_name:
        errors["full_name"] = ["Full name is required"]

    phone = normalize_phone(details.get("phone"))
    if not phone:
        errors["phone"] = ["Phone number is required"]
    elif not PHONE_PATTERN.match(phone):
        errors["phone"] = ["Please enter a valid phone number"]

    email = (details.get("email") or "").strip()
    if not email:
        errors["email"] = ["Email is required"]
    elif not EMAIL_PATTERN.search(email):
        errors["email"] = ["Please enter a valid email address"]

    address = (details.get("address") or "").strip()
    if not address:
        errors["address"] = ["Delivery address is required"]

    city = (details.get("city") or "").strip()
    if not city:
        errors["city"] = ["City is required"]

    if errors:
        raise ValidationError(errors)

    whatsapp_number = normalize_phone(details.get("whatsapp_number")) or None
    return {
        "full_name": full_name,
        "email": email,
        "phone": phone,
        "whatsapp_number": whatsapp_number,
        "address": address,
        "city": city,
        "notes": (details.get("notes") or "").strip() or None,
    }


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A line item of an order, copied from the cart at checkout."""

    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    weight_label = String(max_length=50)
    total_price = Float(required=True, min_value=0.0)

    def to_dict(self):
        return {
            "id": str(self.id),
            "product_id": str(self.product_id),
            "product_name": self.product_name,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "weight_label": self.weight_label,
            "total_price": self.total_price,
        }


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    total_amount = Float(required=True, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    user_email = String(required=True, max_length=255)
    user_full_name = String(max_length=255)
    user_phone = String(max_length=20)
    whatsapp_number = String(max_length=20)
    delivery_address = Text()
    delivery_city = String(max_length=100)
    delivery_notes = Text()
    payment_reference = String(max_length=100)
    idempotency_key = String(max_length=100)
    tracking_number = String(max_length=255)
    admin_notes = Text()
    confirmed_delivery_at = DateTime()
    delivery_confirmation_method = String(choices=DeliveryConfirmationMethod)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id, items_data, delivery_details, payment_reference=None, idempotency_key=None):
        """Create a pending order from cart lines.

        Args:
            customer_id: The customer placing the order.
            items_data: List of dicts with product_id, product_name,
                        unit_price, quantity, weight_label.
            delivery_details: Dict with full_name, email, phone, address,
                              city and optional whatsapp_number and notes.
            payment_reference: Gateway reference when the charge already
                               succeeded; marks the order paid.
            idempotency_key: Optional key guarding against double submission.
        """
        if not items_data:
            raise ValidationError({"items": ["Cart is empty"]})

        details = validate_delivery_details(delivery_details)

        order_items = []
        for data in items_data:
            quantity = int(data["quantity"])
            unit_price = float(data["unit_price"])
            if quantity < 1:
                raise ValidationError({"items": [f"Invalid quantity for product {data['product_id']}"]})
            order_items.append(
                OrderItem(
                    product_id=str(data["product_id"]),
                    product_name=data.get("product_name"),
                    unit_price=unit_price,
                    quantity=quantity,
                    weight_label=data.get("weight_label"),
                    total_price=round(unit_price * quantity, 2),
                )
            )

        total_amount = round(sum(item.total_price for item in order_items), 2)
        if total_amount <= 0:
            raise ValidationError({"total_amount": ["Order total must be greater than zero"]})

        now = datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            total_amount=total_amount,
            status=OrderStatus.PENDING.value,
            payment_status=(PaymentStatus.PAID.value if payment_reference else PaymentStatus.PENDING.value),
            user_email=details["email"],
            user_full_name=details["full_name"],
            user_phone=details["phone"],
            whatsapp_number=details["whatsapp_number"],
            delivery_address=details["address"],
            delivery_city=details["city"],
            delivery_notes=details["notes"],
            payment_reference=payment_reference,
            idempotency_key=idempotency_key,
            created_at=now,
            updated_at=now,
        )
        for item in order_items:
            order.add_items(item)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                user_email=order.user_email,
                user_full_name=order.user_full_name,
                user_phone=order.user_phone,
                delivery_address=order.delivery_address,
                delivery_city=order.delivery_city,
                items=json.dumps(order.items_snapshot()),
                total_amount=total_amount,
                payment_reference=payment_reference,
                placed_at=now,
            )
        )
        return order

    def items_snapshot(self):
        return [
            {
                "product_id": str(item.product_id),
                "product_name": item.product_name,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "weight_label": item.weight_label,
            }
            for item in self.items
        ]

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _change_status(self, target_status, now):
        previous = self.status
        self.status = target_status.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                user_email=self.user_email,
                user_full_name=self.user_full_name,
                previous_status=previous,
                new_status=target_status.value,
                tracking_number=self.tracking_number,
                changed_at=now,
            )
        )

        if target_status == OrderStatus.DELIVERED:
            self.raise_(
                OrderDelivered(
                    order_id=str(self.id),
                    customer_id=str(self.customer_id),
                    items=json.dumps(
                        [{"product_id": str(i.product_id), "product_name": i.product_name} for i in self.items]
                    ),
                    confirmation_method=self.delivery_confirmation_method,
                    delivered_at=now,
                )
            )

    def update_status(self, new_status, notes=None, tracking_number=None):
        """Apply an admin status update.

        Setting the current status again only updates notes and tracking
        number. Returns True when the status actually changed.
        """
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Invalid status: {new_status}"]}) from None

        if target != OrderStatus(self.status):
            self._assert_can_transition(target)

        now = datetime.now(UTC)
        if notes is not None:
            self.admin_notes = notes
        if tracking_number is not None:
            self.tracking_number = tracking_number
        self.updated_at = now

        if target == OrderStatus(self.status):
            return False

        if target == OrderStatus.DELIVERED:
            self.confirmed_delivery_at = now
            self.delivery_confirmation_method = DeliveryConfirmationMethod.ADMIN.value

        self._change_status(target, now)
        return True

    def confirm_delivery_by_customer(self):
        """Mark the order delivered after the customer entered their code.

        Any order that is neither cancelled nor already delivered moves
        straight to delivered.
        """
        current = OrderStatus(self.status)
        if current not in _CUSTOMER_CONFIRMABLE:
            raise ValidationError({"status": [f"Cannot confirm delivery of a {current.value} order"]})

        now = datetime.now(UTC)
        self.confirmed_delivery_at = now
        self.delivery_confirmation_method = DeliveryConfirmationMethod.CUSTOMER_CODE.value
        self._change_status(OrderStatus.DELIVERED, now)

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def record_payment(self, payment_reference, amount=None):
        """Record a gateway-confirmed payment. Repeating the same reference is a no-op."""
        if self.payment_status == PaymentStatus.PAID.value:
            if self.payment_reference and self.payment_reference != payment_reference:
                raise ValidationError({"payment_reference": ["Order is already paid under a different reference"]})
            return False

        if OrderStatus(self.status) == OrderStatus.CANCELLED:
            raise ValidationError({"status": ["Cannot record payment for a cancelled order"]})

        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.PAID.value
        self.payment_reference = payment_reference
        self.updated_at = now

        self.raise_(
            PaymentRecorded(
                order_id=str(self.id),
                payment_reference=payment_reference,
                amount=amount,
                recorded_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------
    def to_dict(self):
        return {
            "id": str(self.id),
            "customer_id": str(self.customer_id),
            "total_amount": self.total_amount,
            "status": self.status,
            "payment_status": self.payment_status,
            "user_email": self.user_email,
            "user_full_name": self.user_full_name,
            "user_phone": self.user_phone,
            "whatsapp_number": self.whatsapp_number,
            "delivery_address": self.delivery_address,
            "delivery_city": self.delivery_city,
            "delivery_notes": self.delivery_notes,
            "payment_reference": self.payment_reference,
            "tracking_number": self.tracking_number,
            "admin_notes": self.admin_notes,
            "confirmed_delivery_at": self.confirmed_delivery_at.isoformat() if self.confirmed_delivery_at else None,
            "delivery_confirmation_method": self.delivery_confirmation_method,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "items": [item.to_dict() for item in self.items],
        }
