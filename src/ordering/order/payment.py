"""Payment recording: command and handler.

The payment gateway's webhook reports successful charges by reference; the
matching order is marked paid.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class RecordPayment:
    payment_reference = String(required=True, max_length=100)
    amount = Float()


@ordering.command_handler(part_of=Order)
class RecordPaymentHandler:
    @handle(RecordPayment)
    def record_payment(self, command):
        repo = current_domain.repository_for(Order)
        orders = repo._dao.query.filter(payment_reference=command.payment_reference).all().items
        if not orders:
            orders = repo._dao.query.filter(idempotency_key=command.payment_reference).all().items
        if not orders:
            raise ObjectNotFoundError(f"No order found for payment reference {command.payment_reference}")

        order = repo.get(orders[0].id)
        order.record_payment(command.payment_reference, amount=command.amount)
        repo.add(order)
        return str(order.id)
