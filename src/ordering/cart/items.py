"""Cart item management: commands and handler.

Commands address the cart through the customer: every customer has at most
one active cart, which is created on the first add.
"""

from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart, find_active_cart, get_or_create_active_cart
from ordering.domain import ordering


@ordering.command(part_of="ShoppingCart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    weight_label = String(max_length=50)
    quantity = Integer(default=1, min_value=1)


@ordering.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)  # <= 0 removes the line


@ordering.command(part_of="ShoppingCart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        cart = get_or_create_active_cart(command.customer_id)
        cart.add_item(
            product_id=command.product_id,
            unit_price=command.unit_price,
            quantity=command.quantity or 1,
            product_name=command.product_name,
            weight_label=command.weight_label,
        )
        current_domain.repository_for(ShoppingCart).add(cart)
        return str(cart.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        cart = find_active_cart(command.customer_id)
        if cart is None:
            return None
        if command.quantity <= 0 and cart.find_item(command.product_id) is None:
            return str(cart.id)
        cart.set_quantity(command.product_id, command.quantity)
        current_domain.repository_for(ShoppingCart).add(cart)
        return str(cart.id)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = find_active_cart(command.customer_id)
        if cart is None or cart.find_item(command.product_id) is None:
            return None
        cart.remove_item(command.product_id)
        current_domain.repository_for(ShoppingCart).add(cart)
        return str(cart.id)
