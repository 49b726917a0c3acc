"""Tests for the Notification aggregate and its state machine."""

import pytest
from notifications.notification.events import (
    NotificationCancelled,
    NotificationCreated,
    NotificationFailed,
    NotificationRetried,
    NotificationSent,
)
from notifications.notification.notification import (
    DEFAULT_MAX_RETRIES,
    Notification,
    NotificationChannel,
    NotificationStatus,
    NotificationType,
    RecipientType,
)
from protean.exceptions import ValidationError


def _notification(**overrides):
    defaults = {
        "recipient": "ama@example.com",
        "notification_type": NotificationType.ORDER_STATUS_UPDATE.value,
        "subject": "Order Update - ord-1",
        "body": "Your order has been shipped.",
    }
    defaults.update(overrides)
    return Notification.create(**defaults)


def _failed(times=1):
    n = _notification()
    n.mark_failed("SMTP timeout")
    for _ in range(times - 1):
        n.retry()
        n.mark_failed("SMTP timeout")
    return n


class TestNotificationCreation:
    def test_create_sets_pending(self):
        n = _notification()
        assert n.status == NotificationStatus.PENDING.value
        assert n.retry_count == 0
        assert n.max_retries == DEFAULT_MAX_RETRIES == 3
        assert n.channel == NotificationChannel.EMAIL.value
        assert n.recipient_type == RecipientType.CUSTOMER.value
        assert n.created_at is not None

    def test_create_raises_event(self):
        n = _notification(recipient_type=RecipientType.INTERNAL.value)
        assert len(n._events) == 1
        event = n._events[0]
        assert isinstance(event, NotificationCreated)
        assert event.notification_id == str(n.id)
        assert event.recipient_type == RecipientType.INTERNAL.value

    def test_body_is_required(self):
        with pytest.raises(ValidationError):
            Notification.create(
                recipient="ama@example.com",
                notification_type=NotificationType.ORDER_STATUS_UPDATE.value,
                body=None,
            )

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            _notification(notification_type="Newsletter")


class TestMarkSent:
    def test_mark_sent(self):
        n = _notification()
        n.mark_sent(message_id="email-123")
        assert n.status == NotificationStatus.SENT.value
        assert n.message_id == "email-123"
        assert n.sent_at is not None
        assert isinstance(n._events[-1], NotificationSent)

    def test_sent_is_terminal(self):
        n = _notification()
        n.mark_sent()
        with pytest.raises(ValidationError):
            n.mark_failed("late failure")


class TestMarkFailed:
    def test_mark_failed_counts_attempt(self):
        n = _notification()
        n.mark_failed("Connection refused")
        assert n.status == NotificationStatus.FAILED.value
        assert n.failure_reason == "Connection refused"
        assert n.retry_count == 1
        assert isinstance(n._events[-1], NotificationFailed)

    def test_missing_reason_defaults(self):
        n = _notification()
        n.mark_failed(None)
        assert n.failure_reason == "Unknown dispatch error"

    def test_long_reason_is_truncated(self):
        n = _notification()
        n.mark_failed("x" * 800)
        assert len(n.failure_reason) == 500


class TestRetry:
    def test_retry_returns_to_pending(self):
        n = _failed()
        n.retry()
        assert n.status == NotificationStatus.PENDING.value
        assert n.retry_count == 1
        assert isinstance(n._events[-1], NotificationRetried)

    def test_can_retry_until_max_attempts(self):
        assert _failed(times=2).can_retry is True
        assert _failed(times=3).can_retry is False

    def test_retry_exhausted_rejected(self):
        n = _failed(times=3)
        with pytest.raises(ValidationError) as exc:
            n.retry()
        assert "retry_count" in exc.value.messages

    def test_only_failed_can_be_retried(self):
        with pytest.raises(ValidationError):
            _notification().retry()

    def test_pending_cannot_retry_flag(self):
        assert _notification().can_retry is False


class TestCancel:
    def test_cancel_pending(self):
        n = _notification()
        n.cancel("Customer unsubscribed")
        assert n.status == NotificationStatus.CANCELLED.value
        assert n.failure_reason == "Customer unsubscribed"
        assert isinstance(n._events[-1], NotificationCancelled)

    def test_cannot_cancel_sent(self):
        n = _notification()
        n.mark_sent()
        with pytest.raises(ValidationError):
            n.cancel()

    def test_cannot_cancel_failed(self):
        with pytest.raises(ValidationError):
            _failed().cancel()


class TestToDict:
    def test_to_dict(self):
        n = _notification()
        data = n.to_dict()
        assert data["notification_id"] == str(n.id)
        assert data["status"] == "pending"
        assert data["sent_at"] is None
        assert data["retry_count"] == 0
        assert data["max_retries"] == 3
