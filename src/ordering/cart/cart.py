"""Shopping Cart aggregate (CQRS): the remote copy of a signed-in customer's cart.

Each customer has at most one active cart. Lines are keyed by product: adding
a product that is already present increases its quantity instead of creating
a second line. The cart is converted, never deleted, when an order is placed
from it.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.cart.events import (
    CartCleared,
    CartConverted,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
    CartReplaced,
)
from ordering.domain import ordering


class CartStatus(Enum):
    ACTIVE = "active"
    CONVERTED = "converted"


@ordering.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    weight_label = String(max_length=50)
    added_at = DateTime()

    def to_dict(self):
        return {
            "product_id": str(self.product_id),
            "product_name": self.product_name,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "weight_label": self.weight_label,
        }


@ordering.aggregate
class ShoppingCart:
    customer_id = Identifier(required=True)
    items = HasMany(CartItem)
    status = String(choices=CartStatus, default=CartStatus.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def products_must_be_unique(self):
        product_ids = [str(item.product_id) for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product may appear only once in a cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(
            customer_id=customer_id,
            status=CartStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def find_item(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    @property
    def total_items(self):
        return sum(item.quantity for item in self.items)

    @property
    def total_amount(self):
        return sum(item.unit_price * item.quantity for item in self.items)

    def snapshot(self):
        """Return the cart lines as plain dicts, in insertion order."""
        return [item.to_dict() for item in self.items]

    def _assert_active(self, action):
        if CartStatus(self.status) != CartStatus.ACTIVE:
            raise ValidationError({"status": [f"Cannot {action} a {self.status} cart"]})

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, unit_price, quantity=1, product_name=None, weight_label=None):
        """Add a product, or increase its quantity by ``quantity`` if already present."""
        self._assert_active("add items to")
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        now = datetime.now(UTC)
        existing = self.find_item(product_id)
        if existing:
            existing.quantity += quantity
            new_quantity = existing.quantity
        else:
            self.add_items(
                CartItem(
                    product_id=product_id,
                    product_name=product_name,
                    unit_price=unit_price,
                    quantity=quantity,
                    weight_label=weight_label,
                    added_at=now,
                )
            )
            new_quantity = quantity

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                product_id=str(product_id),
                product_name=product_name,
                unit_price=unit_price,
                quantity_added=quantity,
                new_quantity=new_quantity,
            )
        )

    def set_quantity(self, product_id, quantity):
        """Set a line's quantity; zero or less removes the line."""
        self._assert_active("update items in")
        if quantity <= 0:
            self.remove_item(product_id)
            return

        item = self.find_item(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Item not found in cart"]})

        previous_quantity = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, product_id):
        self._assert_active("remove items from")

        item = self.find_item(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Item not found in cart"]})

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(product_id)))

    def clear(self):
        self._assert_active("clear")

        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=str(self.id), customer_id=str(self.customer_id)))

    def replace_items(self, items_data):
        """Overwrite the cart with ``items_data`` (list of item dicts).

        Lines are merged by product id so a duplicated product in the input
        ends up as a single line with the combined quantity.
        """
        self._assert_active("replace items in")

        merged = {}
        for data in items_data:
            key = str(data["product_id"])
            if key in merged:
                merged[key]["quantity"] += int(data["quantity"])
            else:
                merged[key] = {
                    "product_id": key,
                    "product_name": data.get("product_name"),
                    "unit_price": float(data["unit_price"]),
                    "quantity": int(data["quantity"]),
                    "weight_label": data.get("weight_label"),
                }

        for item in list(self.items):
            self.remove_items(item)

        now = datetime.now(UTC)
        for data in merged.values():
            if data["quantity"] < 1:
                continue
            self.add_items(CartItem(**data, added_at=now))

        self.updated_at = now

        self.raise_(
            CartReplaced(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                items=json.dumps(self.snapshot()),
                item_count=len(self.items),
            )
        )

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def convert(self, order_id):
        """Mark the cart as converted into ``order_id``."""
        self._assert_active("convert")

        self.status = CartStatus.CONVERTED.value
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartConverted(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                order_id=str(order_id),
                items=json.dumps(self.snapshot()),
            )
        )


def find_active_cart(customer_id):
    """Return the customer's active cart, or None."""
    repo = current_domain.repository_for(ShoppingCart)
    carts = (
        repo._dao.query.filter(customer_id=str(customer_id), status=CartStatus.ACTIVE.value)
        .order_by("-created_at")
        .all()
        .items
    )
    if not carts:
        return None
    return repo.get(carts[0].id)


def get_or_create_active_cart(customer_id):
    """Return the customer's active cart, creating an empty one if needed."""
    cart = find_active_cart(customer_id)
    if cart is None:
        cart = ShoppingCart.create(customer_id=customer_id)
    return cart
