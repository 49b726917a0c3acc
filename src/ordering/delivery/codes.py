"""Delivery confirmation: commands and handler.

``GenerateDeliveryCode`` issues a code for one of the customer's orders;
``ConfirmDelivery`` redeems it and marks the order delivered in the same unit
of work.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.delivery.confirmation import DeliveryConfirmation, outstanding_confirmations, unique_code
from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)

INVALID_CODE_MESSAGE = "Invalid confirmation code or order already confirmed"


@ordering.command(part_of="DeliveryConfirmation")
class GenerateDeliveryCode:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)


@ordering.command(part_of="DeliveryConfirmation")
class ConfirmDelivery:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    confirmation_code = String(required=True, max_length=50)


@ordering.command_handler(part_of=DeliveryConfirmation)
class DeliveryConfirmationHandler:
    @handle(GenerateDeliveryCode)
    def generate_code(self, command):
        order = current_domain.repository_for(Order).get(command.order_id)
        if str(order.customer_id) != str(command.customer_id):
            raise ValidationError({"order_id": ["Order does not belong to this customer"]})

        confirmation = DeliveryConfirmation.issue(
            order_id=command.order_id,
            customer_id=command.customer_id,
            confirmation_code=unique_code(),
        )
        current_domain.repository_for(DeliveryConfirmation).add(confirmation)

        logger.info("Delivery code issued", order_id=str(command.order_id))
        return confirmation.confirmation_code

    @handle(ConfirmDelivery)
    def confirm_delivery(self, command):
        matches = outstanding_confirmations(
            order_id=str(command.order_id),
            customer_id=str(command.customer_id),
            confirmation_code=command.confirmation_code.strip().upper(),
        )
        if not matches:
            raise ValidationError({"confirmation_code": [INVALID_CODE_MESSAGE]})

        confirmation_repo = current_domain.repository_for(DeliveryConfirmation)
        confirmation = confirmation_repo.get(matches[0].id)
        confirmation.confirm()

        order_repo = current_domain.repository_for(Order)
        order = order_repo.get(command.order_id)
        order.confirm_delivery_by_customer()

        confirmation_repo.add(confirmation)
        order_repo.add(order)

        logger.info("Delivery confirmed by customer", order_id=str(command.order_id))
        return str(order.id)
