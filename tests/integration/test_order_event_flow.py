"""Cross-domain flow: Ordering events drive Notifications and Reviews.

Order events are stored in the Ordering event store during the unit of work
commit. The Engine later delivers them to the subscribing domains; here the
stored messages are rebuilt as the shared event contracts and handed to each
consumer directly.
"""

from notifications.channel import get_channel
from notifications.notification.notification import Notification, NotificationChannel, NotificationType
from notifications.notification.ordering_events import OrderingEventsHandler as NotificationsOrderingHandler
from ordering.order.placement import OrderService
from ordering.order.status import UpdateOrderStatus
from protean import current_domain
from protean.utils.reflection import declared_fields
from reviews.review.ordering_events import OrderingEventsHandler as ReviewsOrderingHandler
from reviews.review.review import Review
from reviews.review.submission import SubmitReview
from shared.events.ordering import OrderDelivered, OrderPlaced, OrderStatusChanged

ITEMS = [
    {"product_id": "jasmine-5kg", "product_name": "Jasmine Rice", "unit_price": 120.0, "quantity": 2},
    {"product_id": "gari-1kg", "product_name": "Gari", "unit_price": 25.0, "quantity": 1},
]
DETAILS = {
    "full_name": "Ama Mensah",
    "email": "ama@example.com",
    "phone": "0241234567",
    "address": "12 Ring Road",
    "city": "Accra",
}


def _stored_events(event_type, event_cls):
    """Rebuild stored Ordering messages of ``event_type`` as shared contracts."""
    messages = current_domain.event_store.store.read("ordering::order")
    matching = [
        m
        for m in messages
        if m.metadata and m.metadata.headers and m.metadata.headers.type == event_type
    ]
    field_names = set(declared_fields(event_cls))
    return [event_cls(**{k: v for k, v in m.data.items() if k in field_names}) for m in matching]


def _place_and_deliver():
    order = OrderService().place_order("cust-flow-1", ITEMS, DETAILS)
    for status in ("confirmed", "processing", "shipped", "delivered"):
        current_domain.process(UpdateOrderStatus(order_id=str(order.id), status=status), asynchronous=False)
    return str(order.id)


class TestOrderingToNotifications:
    def test_order_placed_alerts_shop(self, ordering_ctx, notifications_ctx):
        order = OrderService().place_order("cust-flow-1", ITEMS, DETAILS)
        [placed] = _stored_events("Ordering.OrderPlaced.v1", OrderPlaced)
        assert placed.order_id == str(order.id)
        assert placed.total_amount == 265.0

        with notifications_ctx.domain_context():
            NotificationsOrderingHandler().on_order_placed(placed)

            [alert] = (
                current_domain.repository_for(Notification)
                ._dao.query.filter(notification_type=NotificationType.NEW_ORDER_ALERT.value)
                .all()
                .items
            )
            assert alert.recipient == "orders@pureplatterfoods.com"
            assert alert.source_event_id == str(order.id)

        adapter = get_channel(NotificationChannel.EMAIL.value)
        [email] = adapter.sent_to("orders@pureplatterfoods.com")
        assert "Customer: Ama Mensah" in email["text"]

    def test_each_status_change_emails_customer(self, ordering_ctx, notifications_ctx):
        _place_and_deliver()
        changes = _stored_events("Ordering.OrderStatusChanged.v1", OrderStatusChanged)
        assert [c.new_status for c in changes] == ["confirmed", "processing", "shipped", "delivered"]

        with notifications_ctx.domain_context():
            handler = NotificationsOrderingHandler()
            for change in changes:
                handler.on_order_status_changed(change)

        adapter = get_channel(NotificationChannel.EMAIL.value)
        assert len(adapter.sent_to("ama@example.com")) == 4


class TestOrderingToReviews:
    def test_delivered_order_unlocks_reviews(self, ordering_ctx, reviews_ctx):
        order_id = _place_and_deliver()
        [delivered] = _stored_events("Ordering.OrderDelivered.v1", OrderDelivered)
        assert delivered.confirmation_method == "admin"

        with reviews_ctx.domain_context():
            ReviewsOrderingHandler().on_order_delivered(delivered)
            result = current_domain.process(
                SubmitReview(
                    customer_id="cust-flow-1",
                    order_id=order_id,
                    product_id="gari-1kg",
                    rating=4,
                    user_name="Ama",
                ),
                asynchronous=False,
            )
            assert current_domain.repository_for(Review).get(result["id"]).is_verified is True
