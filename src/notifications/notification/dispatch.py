"""Internal dispatch handler: sends notifications via channel adapters.

Reacts to NotificationCreated events and delivers the notification through
its channel adapter, updating the status to SENT or FAILED. The outbox
worker reuses ``dispatch_notification`` for pending and retried records.
"""

import structlog
from notifications.channel import get_channel
from notifications.domain import notifications
from notifications.notification.events import NotificationCreated
from notifications.notification.helpers import sender_address
from notifications.notification.notification import (
    Notification,
    NotificationChannel,
    NotificationStatus,
)
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

logger = structlog.get_logger(__name__)


def dispatch_notification(notification: Notification) -> bool:
    """Send a PENDING notification and record the outcome on it.

    The caller persists the notification. Returns True when sent.
    """
    try:
        adapter = get_channel(notification.channel)
        result = _dispatch_via_channel(adapter, notification)
    except Exception as e:
        result = {"status": "failed", "error": str(e)}

    if result.get("status") == "sent":
        notification.mark_sent(message_id=result.get("message_id"))
        logger.info("Notification sent", notification_id=str(notification.id))
        return True

    notification.mark_failed(result.get("error", "Unknown dispatch error"))
    logger.warning(
        "Notification dispatch failed",
        notification_id=str(notification.id),
        error=notification.failure_reason,
        retry_count=notification.retry_count,
    )
    return False


def _dispatch_via_channel(adapter, notification: Notification) -> dict:
    """Route dispatch to the correct adapter method based on channel."""
    channel = notification.channel

    if channel == NotificationChannel.EMAIL.value:
        return adapter.send(
            from_address=sender_address(),
            to=notification.recipient,
            subject=notification.subject or "",
            html=notification.html_body,
            text=notification.body,
            reply_to=notification.reply_to,
        )
    return {"status": "failed", "error": f"Unknown channel: {channel}"}


@notifications.event_handler(part_of=Notification)
class NotificationDispatcher:
    """Dispatches notifications via channel adapters when they are created."""

    @handle(NotificationCreated)
    def on_notification_created(self, event: NotificationCreated) -> None:
        repo = current_domain.repository_for(Notification)

        try:
            notification = repo.get(event.notification_id)
        except ObjectNotFoundError:
            logger.error(
                "Failed to load notification for dispatch",
                notification_id=str(event.notification_id),
            )
            return

        # Only dispatch PENDING notifications
        if NotificationStatus(notification.status) != NotificationStatus.PENDING:
            logger.info(
                "Notification not in PENDING status, skipping dispatch",
                notification_id=str(event.notification_id),
                status=notification.status,
            )
            return

        dispatch_notification(notification)
        repo.add(notification)
