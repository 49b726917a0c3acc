"""Inbound cross-domain event handler: Notifications reacts to Order events.

Listens for OrderPlaced (new-order alert to the shop inbox) and
OrderStatusChanged (status update email to the customer).
"""

import structlog
from notifications.domain import notifications
from notifications.notification.helpers import (
    create_customer_notification,
    create_internal_notification,
)
from notifications.notification.notification import Notification, NotificationType
from protean.utils.mixins import handle
from shared.events.ordering import OrderPlaced, OrderStatusChanged

logger = structlog.get_logger(__name__)

notifications.register_external_event(OrderPlaced, "Ordering.OrderPlaced.v1")
notifications.register_external_event(OrderStatusChanged, "Ordering.OrderStatusChanged.v1")


@notifications.event_handler(part_of=Notification, stream_category="ordering::order")
class OrderingEventsHandler:
    """Reacts to Ordering domain events to queue outbound email."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        """Alert the shop that a new order came in."""
        create_internal_notification(
            notification_type=NotificationType.NEW_ORDER_ALERT.value,
            context={
                "order_id": str(event.order_id),
                "user_full_name": event.user_full_name,
                "user_email": event.user_email,
                "user_phone": event.user_phone,
                "status": "pending",
                "total_amount": event.total_amount,
                "delivery_address": event.delivery_address,
                "delivery_city": event.delivery_city,
            },
            source_event_type="Ordering.OrderPlaced.v1",
            source_event_id=str(event.order_id),
        )

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        """Tell the customer their order moved on."""
        if not event.user_email:
            logger.info(
                "OrderStatusChanged without customer email, skipping update",
                order_id=str(event.order_id),
            )
            return

        create_customer_notification(
            email=event.user_email,
            notification_type=NotificationType.ORDER_STATUS_UPDATE.value,
            context={
                "order_id": str(event.order_id),
                "user_full_name": event.user_full_name,
                "previous_status": event.previous_status,
                "new_status": event.new_status,
                "tracking_number": event.tracking_number,
            },
            source_event_type="Ordering.OrderStatusChanged.v1",
            source_event_id=str(event.order_id),
        )
