"""Shared BDD fixtures and step definitions for the Notifications domain."""

from notifications.notification.helpers import create_customer_notification
from notifications.notification.notification import Notification, NotificationType
from notifications.notification.outbox import DispatchPendingNotifications
from protean import current_domain
from pytest_bdd import given, parsers, then, when


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("the email provider is down")
def provider_down(email_adapter):
    email_adapter.configure(should_succeed=False, failure_reason="Provider unavailable")


@given("the email provider is up")
def provider_up(email_adapter):
    email_adapter.configure(should_succeed=True)


@given("an order status update is queued for the customer", target_fixture="notification_id")
def status_update_queued():
    return create_customer_notification(
        email="ama@example.com",
        notification_type=NotificationType.ORDER_STATUS_UPDATE.value,
        context={"order_id": "ord-bdd-1", "new_status": "shipped"},
    )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the outbox worker runs")
def worker_runs():
    current_domain.process(DispatchPendingNotifications(), asynchronous=False)


@when(parsers.cfparse("the outbox worker runs {times:d} times"))
def worker_runs_n_times(times):
    for _ in range(times):
        current_domain.process(DispatchPendingNotifications(), asynchronous=False)


@when("the email provider recovers")
def provider_recovers(email_adapter):
    email_adapter.configure(should_succeed=True)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the notification status is "{status}"'))
def notification_status_is(notification_id, status):
    assert current_domain.repository_for(Notification).get(notification_id).status == status


@then(parsers.cfparse("the notification has been attempted {count:d} times"))
def notification_attempts(notification_id, count):
    assert current_domain.repository_for(Notification).get(notification_id).retry_count == count


@then("the notification cannot be retried")
def notification_cannot_retry(notification_id):
    assert current_domain.repository_for(Notification).get(notification_id).can_retry is False


@then(parsers.cfparse('the customer received {count:d} email'))
def customer_received(email_adapter, count):
    assert len(email_adapter.sent_to("ama@example.com")) == count
