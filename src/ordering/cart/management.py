"""Cart management: commands and handler.

Handles clearing a cart and overwriting it wholesale during reconciliation
with a device's local cart.
"""

import json

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart, find_active_cart, get_or_create_active_cart
from ordering.domain import ordering


@ordering.command(part_of="ShoppingCart")
class ClearCart:
    customer_id = Identifier(required=True)


@ordering.command(part_of="ShoppingCart")
class ReplaceCart:
    """Overwrite the customer's active cart with the given items."""

    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, product_name, unit_price, quantity, weight_label}


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartHandler:
    @handle(ClearCart)
    def clear_cart(self, command):
        cart = find_active_cart(command.customer_id)
        if cart is None:
            return None
        cart.clear()
        current_domain.repository_for(ShoppingCart).add(cart)
        return str(cart.id)

    @handle(ReplaceCart)
    def replace_cart(self, command):
        items = json.loads(command.items) if isinstance(command.items, str) else command.items

        cart = get_or_create_active_cart(command.customer_id)
        cart.replace_items(items)
        current_domain.repository_for(ShoppingCart).add(cart)
        return str(cart.id)
