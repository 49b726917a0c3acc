"""Remote cart gateway: the server-side copy of a signed-in customer's cart."""

import json
from abc import ABC, abstractmethod

from ordering.cart.cart import find_active_cart
from ordering.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from ordering.cart.management import ClearCart, ReplaceCart


class RemoteCart(ABC):
    """Port used by the CartStore to reach the remote cart."""

    @abstractmethod
    def load(self, customer_id: str) -> list[dict]: ...

    @abstractmethod
    def add(self, customer_id: str, item: dict, quantity: int) -> None: ...

    @abstractmethod
    def set_quantity(self, customer_id: str, product_id: str, quantity: int) -> None: ...

    @abstractmethod
    def remove(self, customer_id: str, product_id: str) -> None: ...

    @abstractmethod
    def clear(self, customer_id: str) -> None: ...

    @abstractmethod
    def replace(self, customer_id: str, items: list[dict]) -> None: ...


class DomainRemoteCart(RemoteCart):
    """Remote cart backed by the ordering domain's ShoppingCart aggregate."""

    def __init__(self, domain) -> None:
        self.domain = domain

    def load(self, customer_id: str) -> list[dict]:
        with self.domain.domain_context():
            cart = find_active_cart(customer_id)
            return cart.snapshot() if cart else []

    def add(self, customer_id: str, item: dict, quantity: int) -> None:
        self._process(
            AddToCart(
                customer_id=customer_id,
                product_id=item["product_id"],
                product_name=item.get("product_name"),
                unit_price=item["unit_price"],
                weight_label=item.get("weight_label"),
                quantity=quantity,
            )
        )

    def set_quantity(self, customer_id: str, product_id: str, quantity: int) -> None:
        self._process(UpdateCartQuantity(customer_id=customer_id, product_id=product_id, quantity=quantity))

    def remove(self, customer_id: str, product_id: str) -> None:
        self._process(RemoveFromCart(customer_id=customer_id, product_id=product_id))

    def clear(self, customer_id: str) -> None:
        self._process(ClearCart(customer_id=customer_id))

    def replace(self, customer_id: str, items: list[dict]) -> None:
        self._process(ReplaceCart(customer_id=customer_id, items=json.dumps(items)))

    def _process(self, command):
        with self.domain.domain_context():
            return self.domain.process(command, asynchronous=False)
