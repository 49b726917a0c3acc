"""Shared helpers for creating notifications.

Renders the template for a notification type and records the resulting
message in the outbox. Delivery happens separately (see ``dispatch``).
"""

import json
import os

import structlog
from notifications.notification.notification import Notification, RecipientType
from notifications.templates import get_template
from protean.utils.globals import current_domain

logger = structlog.get_logger(__name__)

DEFAULT_SENDER = "PurePlatter Foods <noreply@pureplatterfoods.com>"


def sender_address() -> str:
    return os.environ.get("EMAIL_FROM") or DEFAULT_SENDER


def admin_address() -> str | None:
    """The shop inbox that receives internal alerts (``ADMIN_EMAIL``)."""
    return os.environ.get("ADMIN_EMAIL") or None


def _create(
    recipient: str,
    recipient_type: str,
    notification_type: str,
    context: dict,
    reply_to: str | None,
    source_event_type: str | None,
    source_event_id: str | None,
) -> str:
    rendered = get_template(notification_type).render(context)

    notification = Notification.create(
        recipient=recipient,
        recipient_type=recipient_type,
        notification_type=notification_type,
        subject=rendered.get("subject"),
        body=rendered["body"],
        html_body=rendered.get("html_body"),
        reply_to=reply_to,
        source_event_type=source_event_type,
        source_event_id=source_event_id,
        context_data=json.dumps(context, default=str),
    )
    current_domain.repository_for(Notification).add(notification)

    logger.info(
        "Notification queued",
        notification_id=str(notification.id),
        notification_type=notification_type,
        recipient_type=recipient_type,
    )
    return str(notification.id)


def create_customer_notification(
    email: str,
    notification_type: str,
    context: dict,
    reply_to: str | None = None,
    source_event_type: str | None = None,
    source_event_id: str | None = None,
) -> str | None:
    """Queue an email to a customer.

    Returns:
        The notification ID, or None when there is no address to send to.
    """
    if not email:
        logger.warning("No customer email, notification skipped", notification_type=notification_type)
        return None
    return _create(
        email,
        RecipientType.CUSTOMER.value,
        notification_type,
        context,
        reply_to,
        source_event_type,
        source_event_id,
    )


def create_internal_notification(
    notification_type: str,
    context: dict,
    reply_to: str | None = None,
    source_event_type: str | None = None,
    source_event_id: str | None = None,
) -> str | None:
    """Queue an email to the shop's admin inbox.

    Returns:
        The notification ID, or None when ADMIN_EMAIL is not configured.
    """
    recipient = admin_address()
    if recipient is None:
        logger.warning("ADMIN_EMAIL is not configured, internal notification skipped", notification_type=notification_type)
        return None
    return _create(
        recipient,
        RecipientType.INTERNAL.value,
        notification_type,
        context,
        reply_to,
        source_event_type,
        source_event_id,
    )
