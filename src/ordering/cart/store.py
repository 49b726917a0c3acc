"""CartStore: the two-tier cart held by a visitor session.

The local tier (``LocalCartStorage``) is the working copy and is written on
every mutation. Once the session is signed in, each mutation is mirrored to
the remote tier (``RemoteCart``). Remote failures are logged and never fail
the local operation; the next reconciliation repairs any divergence.

Reconciliation rule: a non-empty local cart replaces the remote cart
wholesale, an empty local cart adopts the remote cart's items.
"""

import time
from dataclasses import asdict, dataclass

import structlog

from ordering.cart.local_storage import LocalCartStorage
from ordering.cart.remote import RemoteCart

logger = structlog.get_logger(__name__)

RECONCILE_INTERVAL_SECONDS = 1.0


@dataclass
class CartLine:
    product_id: str
    unit_price: float
    quantity: int
    weight_label: str | None = None
    product_name: str | None = None

    @property
    def total_price(self) -> float:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        return cls(
            product_id=str(data["product_id"]),
            unit_price=float(data["unit_price"]),
            quantity=int(data["quantity"]),
            weight_label=data.get("weight_label"),
            product_name=data.get("product_name"),
        )


class CartStore:
    def __init__(self, storage: LocalCartStorage, remote: RemoteCart, clock=time.monotonic) -> None:
        self.storage = storage
        self.remote = remote
        self.customer_id: str | None = None
        self._clock = clock
        self._last_reconciled_at: float | None = None
        self._lines: list[CartLine] = self._load_local()

    # -------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------
    @property
    def items(self) -> list[CartLine]:
        """A snapshot of the cart lines; mutating it does not affect the cart."""
        return [CartLine(**line.to_dict()) for line in self._lines]

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def total_amount(self) -> float:
        return sum(line.total_price for line in self._lines)

    @property
    def is_authenticated(self) -> bool:
        return self.customer_id is not None

    def _find(self, product_id: str) -> CartLine | None:
        return next((line for line in self._lines if line.product_id == str(product_id)), None)

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add(
        self,
        product_id: str,
        unit_price: float,
        label: str | None = None,
        qty: int = 1,
        product_name: str | None = None,
    ) -> None:
        """Add a product; an existing line is incremented by one.

        A new line needs ``qty`` of at least 1, otherwise nothing is added.
        """
        existing = self._find(product_id)
        if existing:
            existing.quantity += 1
            delta = 1
            line = existing
        else:
            if qty < 1:
                logger.warning("Ignoring cart add with non-positive quantity", product_id=str(product_id), qty=qty)
                return
            line = CartLine(
                product_id=str(product_id),
                unit_price=float(unit_price),
                quantity=qty,
                weight_label=label,
                product_name=product_name,
            )
            self._lines.append(line)
            delta = qty

        self._save_local()

        if self.is_authenticated:
            self._remote_call("add", self.remote.add, self.customer_id, line.to_dict(), delta)

    def update_quantity(self, product_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove(product_id)
            return

        line = self._find(product_id)
        if line is None:
            return
        line.quantity = quantity
        self._save_local()

        if self.is_authenticated:
            self._remote_call("set_quantity", self.remote.set_quantity, self.customer_id, line.product_id, quantity)

    def remove(self, product_id: str) -> None:
        self._lines = [line for line in self._lines if line.product_id != str(product_id)]
        self._save_local()

        if self.is_authenticated:
            self._remote_call("remove", self.remote.remove, self.customer_id, str(product_id))

    def clear(self) -> None:
        self.clear_on_order_success()

        if self.is_authenticated:
            self._remote_call("clear", self.remote.clear, self.customer_id)

    def clear_on_order_success(self) -> None:
        """Empty the local cart only; the remote cart was converted by order placement."""
        self._lines = []
        self.storage.clear()

    # -------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------
    def sign_in(self, customer_id: str) -> None:
        self.customer_id = str(customer_id)

        now = self._clock()
        if self._last_reconciled_at is not None and now - self._last_reconciled_at < RECONCILE_INTERVAL_SECONDS:
            logger.debug("Skipping cart reconciliation, ran recently", customer_id=self.customer_id)
            return
        self.reconcile()

    def sign_out(self) -> None:
        self.customer_id = None

    def reconcile(self) -> None:
        if not self.is_authenticated:
            return

        self._last_reconciled_at = self._clock()

        if self._lines:
            self._remote_call(
                "replace",
                self.remote.replace,
                self.customer_id,
                [line.to_dict() for line in self._lines],
            )
            return

        try:
            remote_items = self.remote.load(self.customer_id)
        except Exception as exc:
            logger.error("Failed to load remote cart", customer_id=self.customer_id, error=str(exc))
            return

        self._lines = [CartLine.from_dict(item) for item in remote_items]
        self._save_local()
        logger.info("Adopted remote cart", customer_id=self.customer_id, item_count=len(self._lines))

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _load_local(self) -> list[CartLine]:
        lines = []
        for data in self.storage.load():
            try:
                lines.append(CartLine.from_dict(data))
            except (KeyError, TypeError, ValueError):
                logger.warning("Dropping malformed local cart line", line=data)
        return lines

    def _save_local(self) -> None:
        if self._lines:
            self.storage.save([line.to_dict() for line in self._lines])
        else:
            self.storage.clear()

    def _remote_call(self, operation, func, *args) -> None:
        try:
            func(*args)
        except Exception as exc:
            logger.error(
                "Remote cart update failed",
                operation=operation,
                customer_id=self.customer_id,
                error=str(exc),
            )
