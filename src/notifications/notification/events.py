"""Domain events for the Notification aggregate."""

from notifications.domain import notifications
from protean.fields import DateTime, Identifier, Integer, String


@notifications.event(part_of="Notification")
class NotificationCreated:
    """A notification was created and queued for dispatch."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient: String(required=True)
    recipient_type: String(required=True)
    notification_type: String(required=True)
    channel: String(required=True)
    subject: String()
    source_event_type: String()
    created_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationSent:
    """The channel adapter accepted the notification."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient: String(required=True)
    channel: String(required=True)
    message_id: String()
    sent_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationFailed:
    """A dispatch attempt failed."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient: String(required=True)
    channel: String(required=True)
    reason: String(required=True, max_length=500)
    retry_count: Integer(required=True)
    max_retries: Integer(required=True)
    failed_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationCancelled:
    """A pending notification was cancelled before dispatch."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient: String(required=True)
    reason: String(max_length=500)
    cancelled_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationRetried:
    """A failed notification was put back in the queue."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient: String(required=True)
    retry_count: Integer(required=True)
    retried_at: DateTime(required=True)
