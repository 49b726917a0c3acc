"""Customer inquiries: contact messages, quote requests and order alerts.

Each command validates the submission and queues the matching emails in
the outbox. The HTTP layer returns once the records are stored; delivery
is left to the dispatcher and the outbox worker.
"""

import re

import structlog
from notifications.domain import notifications
from notifications.notification.helpers import (
    admin_address,
    create_customer_notification,
    create_internal_notification,
)
from notifications.notification.notification import Notification, NotificationType
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.mixins import handle

logger = structlog.get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _require_admin_inbox() -> None:
    if admin_address() is None:
        raise ValidationError({"recipient": ["Notification recipient is not configured"]})


def _check_email(email: str) -> None:
    if not EMAIL_PATTERN.match(email or ""):
        raise ValidationError({"email": ["Invalid email address"]})


@notifications.command(part_of="Notification")
class SubmitContactMessage:
    first_name: String(required=True, max_length=100)
    last_name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)
    phone: String(max_length=30)
    subject: String(max_length=200)
    message: Text(required=True)


@notifications.command(part_of="Notification")
class RequestQuote:
    name: String(required=True, max_length=200)
    email: String(required=True, max_length=254)
    phone: String(max_length=30)
    quantity: String(max_length=100)
    message: Text()


@notifications.command(part_of="Notification")
class NotifyAdminOfOrder:
    """Explicit new-order alert, sent by the storefront after checkout."""

    order_id: Identifier(required=True)
    user_full_name: String(max_length=200)
    user_email: String(max_length=254)
    user_phone: String(max_length=30)
    status: String(max_length=20)
    total_amount: Float()
    delivery_address: String(max_length=500)
    delivery_city: String(max_length=100)


@notifications.command_handler(part_of=Notification)
class InquiryHandler:
    @handle(SubmitContactMessage)
    def submit_contact_message(self, command: SubmitContactMessage):
        _check_email(command.email)
        _require_admin_inbox()

        notification_id = create_internal_notification(
            notification_type=NotificationType.CONTACT_MESSAGE.value,
            context={
                "first_name": command.first_name,
                "last_name": command.last_name,
                "email": command.email,
                "phone": command.phone,
                "subject": command.subject,
                "message": command.message,
            },
            reply_to=command.email,
            source_event_type="Notifications.SubmitContactMessage",
        )
        logger.info("Contact message received", notification_id=notification_id)
        return notification_id

    @handle(RequestQuote)
    def request_quote(self, command: RequestQuote):
        _check_email(command.email)
        _require_admin_inbox()

        context = {
            "name": command.name,
            "email": command.email,
            "phone": command.phone,
            "quantity": command.quantity,
            "message": command.message,
        }
        notification_id = create_internal_notification(
            notification_type=NotificationType.QUOTE_REQUEST.value,
            context=context,
            reply_to=command.email,
            source_event_type="Notifications.RequestQuote",
        )
        create_customer_notification(
            email=command.email,
            notification_type=NotificationType.QUOTE_ACKNOWLEDGEMENT.value,
            context=context,
            reply_to=admin_address(),
            source_event_type="Notifications.RequestQuote",
        )
        logger.info("Quote request received", notification_id=notification_id)
        return notification_id

    @handle(NotifyAdminOfOrder)
    def notify_admin_of_order(self, command: NotifyAdminOfOrder):
        _require_admin_inbox()

        return create_internal_notification(
            notification_type=NotificationType.NEW_ORDER_ALERT.value,
            context={
                "order_id": str(command.order_id),
                "user_full_name": command.user_full_name,
                "user_email": command.user_email,
                "user_phone": command.user_phone,
                "status": command.status or "pending",
                "total_amount": command.total_amount,
                "delivery_address": command.delivery_address,
                "delivery_city": command.delivery_city,
            },
            reply_to=command.user_email,
            source_event_type="Notifications.NotifyAdminOfOrder",
            source_event_id=str(command.order_id),
        )
