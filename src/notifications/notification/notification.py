"""Notification aggregate (CQRS): one queued outbound message.

Notifications form a durable outbox: the record is written first, and
delivery happens afterwards through a channel adapter, either immediately by
the dispatcher or later by the outbox worker. Failed deliveries are retried
until ``max_retries`` attempts have failed.

State Machine:
    PENDING → SENT
    PENDING → FAILED → (retry) → PENDING
    PENDING → CANCELLED
"""

from datetime import UTC, datetime
from enum import Enum

from notifications.domain import notifications
from notifications.notification.events import (
    NotificationCancelled,
    NotificationCreated,
    NotificationFailed,
    NotificationRetried,
    NotificationSent,
)
from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer, String, Text


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class NotificationType(Enum):
    ORDER_STATUS_UPDATE = "OrderStatusUpdate"
    NEW_ORDER_ALERT = "NewOrderAlert"
    CONTACT_MESSAGE = "ContactMessage"
    QUOTE_REQUEST = "QuoteRequest"
    QUOTE_ACKNOWLEDGEMENT = "QuoteAcknowledgement"


class NotificationChannel(Enum):
    EMAIL = "Email"


class NotificationStatus(Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
    CANCELLED = "cancelled"


class RecipientType(Enum):
    CUSTOMER = "customer"
    INTERNAL = "internal"


DEFAULT_MAX_RETRIES = 3


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    NotificationStatus.PENDING: {
        NotificationStatus.SENT,
        NotificationStatus.FAILED,
        NotificationStatus.CANCELLED,
    },
    NotificationStatus.FAILED: {
        NotificationStatus.PENDING,  # Via retry
    },
    NotificationStatus.SENT: set(),  # Terminal
    NotificationStatus.CANCELLED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@notifications.aggregate
class Notification:
    """A single outbound message and its delivery history."""

    # Recipient
    recipient: String(required=True, max_length=255)
    recipient_type: String(choices=RecipientType, default=RecipientType.CUSTOMER.value)

    # Notification type and channel
    notification_type: String(choices=NotificationType, required=True)
    channel: String(choices=NotificationChannel, default=NotificationChannel.EMAIL.value)

    # Content
    subject: String(max_length=500)
    body: Text(required=True)
    html_body: Text()
    reply_to: String(max_length=255)

    # Source correlation
    source_event_type: String(max_length=200)
    source_event_id: String(max_length=200)
    context_data: Text()  # JSON: data used to render the template

    # Status
    status: String(choices=NotificationStatus, default=NotificationStatus.PENDING.value)

    # Delivery tracking
    sent_at: DateTime()
    message_id: String(max_length=255)
    failure_reason: String(max_length=500)

    # Retry
    retry_count: Integer(default=0)
    max_retries: Integer(default=DEFAULT_MAX_RETRIES)

    # Timestamps
    created_at: DateTime()
    updated_at: DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        recipient,
        notification_type,
        body,
        subject=None,
        html_body=None,
        reply_to=None,
        recipient_type=RecipientType.CUSTOMER.value,
        channel=NotificationChannel.EMAIL.value,
        source_event_type=None,
        source_event_id=None,
        context_data=None,
        max_retries=DEFAULT_MAX_RETRIES,
    ):
        """Create a new notification in PENDING status."""
        now = datetime.now(UTC)

        notification = cls(
            recipient=recipient,
            recipient_type=recipient_type,
            notification_type=notification_type,
            channel=channel,
            subject=subject,
            body=body,
            html_body=html_body,
            reply_to=reply_to,
            source_event_type=source_event_type,
            source_event_id=source_event_id,
            context_data=context_data,
            status=NotificationStatus.PENDING.value,
            retry_count=0,
            max_retries=max_retries,
            created_at=now,
            updated_at=now,
        )

        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                recipient=recipient,
                recipient_type=recipient_type,
                notification_type=notification_type,
                channel=channel,
                subject=subject,
                source_event_type=source_event_type,
                created_at=now,
            )
        )

        return notification

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate state machine transition."""
        current = NotificationStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    @property
    def can_retry(self):
        return NotificationStatus(self.status) == NotificationStatus.FAILED and self.retry_count < self.max_retries

    def mark_sent(self, message_id=None, sent_at=None):
        self._assert_can_transition(NotificationStatus.SENT)

        now = sent_at or datetime.now(UTC)
        self.status = NotificationStatus.SENT.value
        self.sent_at = now
        self.message_id = message_id
        self.failure_reason = None
        self.updated_at = now

        self.raise_(
            NotificationSent(
                notification_id=str(self.id),
                recipient=self.recipient,
                channel=self.channel,
                message_id=message_id,
                sent_at=now,
            )
        )

    def mark_failed(self, reason):
        """Record a failed delivery attempt."""
        self._assert_can_transition(NotificationStatus.FAILED)

        now = datetime.now(UTC)
        self.status = NotificationStatus.FAILED.value
        self.failure_reason = (reason or "Unknown dispatch error")[:500]
        self.retry_count = self.retry_count + 1
        self.updated_at = now

        self.raise_(
            NotificationFailed(
                notification_id=str(self.id),
                recipient=self.recipient,
                channel=self.channel,
                reason=self.failure_reason,
                retry_count=self.retry_count,
                max_retries=self.max_retries,
                failed_at=now,
            )
        )

    def cancel(self, reason=None):
        """Cancel a pending notification."""
        self._assert_can_transition(NotificationStatus.CANCELLED)

        now = datetime.now(UTC)
        self.status = NotificationStatus.CANCELLED.value
        self.failure_reason = reason
        self.updated_at = now

        self.raise_(
            NotificationCancelled(
                notification_id=str(self.id),
                recipient=self.recipient,
                reason=reason,
                cancelled_at=now,
            )
        )

    def retry(self):
        """Put a failed notification back in the queue."""
        if NotificationStatus(self.status) != NotificationStatus.FAILED:
            raise ValidationError({"status": ["Only failed notifications can be retried"]})
        if self.retry_count >= self.max_retries:
            raise ValidationError({"retry_count": ["Maximum retry attempts exceeded"]})

        now = datetime.now(UTC)
        self.status = NotificationStatus.PENDING.value
        self.updated_at = now

        self.raise_(
            NotificationRetried(
                notification_id=str(self.id),
                recipient=self.recipient,
                retry_count=self.retry_count,
                retried_at=now,
            )
        )

    def to_dict(self):
        return {
            "notification_id": str(self.id),
            "recipient": self.recipient,
            "recipient_type": self.recipient_type,
            "notification_type": self.notification_type,
            "channel": self.channel,
            "subject": self.subject,
            "status": self.status,
            "source_event_type": self.source_event_type,
            "failure_reason": self.failure_reason,
            "retry_count": self.retry_count,
            "max_retries": self.max_retries,
            "sent_at": self.sent_at.isoformat() if self.sent_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
