"""Domain events for the DeliveryConfirmation aggregate."""

from protean.fields import DateTime, Identifier, String

from ordering.domain import ordering


@ordering.event(part_of="DeliveryConfirmation")
class DeliveryCodeIssued:
    __version__ = 1

    confirmation_id = Identifier(required=True)
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    issued_at = DateTime(required=True)


@ordering.event(part_of="DeliveryConfirmation")
class DeliveryConfirmed:
    __version__ = 1

    confirmation_id = Identifier(required=True)
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    confirmation_method = String(required=True)
    confirmed_at = DateTime(required=True)
