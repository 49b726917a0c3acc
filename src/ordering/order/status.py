"""Admin status review: command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    notes = Text()
    tracking_number = String(max_length=255)
    updated_by = String(max_length=255)


@ordering.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous_status = order.status

        changed = order.update_status(
            command.status,
            notes=command.notes,
            tracking_number=command.tracking_number,
        )
        repo.add(order)

        logger.info(
            "Order status updated" if changed else "Order notes updated",
            order_id=str(order.id),
            previous_status=previous_status,
            new_status=order.status,
            updated_by=command.updated_by,
        )
        return order.to_dict()
