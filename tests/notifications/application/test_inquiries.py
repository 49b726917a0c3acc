"""Application tests for contact messages, quote requests and explicit order alerts."""

import pytest
from notifications.notification.inquiries import NotifyAdminOfOrder, RequestQuote, SubmitContactMessage
from notifications.notification.notification import Notification, NotificationType, RecipientType
from protean import current_domain
from protean.exceptions import ValidationError


def _contact(**overrides):
    values = {
        "first_name": "Kofi",
        "last_name": "Asante",
        "email": "kofi@example.com",
        "phone": "0201234567",
        "subject": "Wholesale",
        "message": "Do you deliver to Tamale?",
    }
    values.update(overrides)
    return SubmitContactMessage(**values)


class TestSubmitContactMessage:
    def test_queues_message_for_shop(self, email_adapter):
        nid = current_domain.process(_contact(), asynchronous=False)

        n = current_domain.repository_for(Notification).get(nid)
        assert n.notification_type == NotificationType.CONTACT_MESSAGE.value
        assert n.recipient == "orders@pureplatterfoods.com"
        assert n.reply_to == "kofi@example.com"

        [email] = email_adapter.sent_to("orders@pureplatterfoods.com")
        assert email["subject"] == "New Contact Message: Wholesale"
        assert email["reply_to"] == "kofi@example.com"

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError) as exc:
            current_domain.process(_contact(email="not-an-email"), asynchronous=False)
        assert exc.value.messages == {"email": ["Invalid email address"]}
        assert current_domain.repository_for(Notification)._dao.query.all().items == []

    def test_missing_admin_inbox_rejected(self, monkeypatch):
        monkeypatch.delenv("ADMIN_EMAIL")
        with pytest.raises(ValidationError) as exc:
            current_domain.process(_contact(), asynchronous=False)
        assert exc.value.messages == {"recipient": ["Notification recipient is not configured"]}

    def test_message_is_required(self):
        with pytest.raises(ValidationError):
            _contact(message=None)


class TestRequestQuote:
    def test_queues_request_and_acknowledgement(self, email_adapter):
        current_domain.process(
            RequestQuote(name="Efua", email="efua@example.com", quantity="50 bags", message="For a wedding"),
            asynchronous=False,
        )

        [request] = email_adapter.sent_to("orders@pureplatterfoods.com")
        assert request["subject"] == "New Quote Request from Efua"
        assert request["reply_to"] == "efua@example.com"

        [ack] = email_adapter.sent_to("efua@example.com")
        assert ack["subject"] == "Quote Request Confirmation - We'll be in touch soon!"
        assert ack["reply_to"] == "orders@pureplatterfoods.com"

        types = {
            (n.notification_type, n.recipient_type)
            for n in current_domain.repository_for(Notification)._dao.query.all().items
        }
        assert types == {
            (NotificationType.QUOTE_REQUEST.value, RecipientType.INTERNAL.value),
            (NotificationType.QUOTE_ACKNOWLEDGEMENT.value, RecipientType.CUSTOMER.value),
        }

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            current_domain.process(RequestQuote(name="Efua", email="efua@"), asynchronous=False)


class TestNotifyAdminOfOrder:
    def test_sends_new_order_alert(self, email_adapter):
        nid = current_domain.process(
            NotifyAdminOfOrder(
                order_id="ord-55",
                user_full_name="Ama Mensah",
                user_email="ama@example.com",
                total_amount=120.0,
                delivery_address="12 Ring Road",
                delivery_city="Accra",
            ),
            asynchronous=False,
        )

        n = current_domain.repository_for(Notification).get(nid)
        assert n.notification_type == NotificationType.NEW_ORDER_ALERT.value
        assert n.source_event_id == "ord-55"

        [email] = email_adapter.sent_to("orders@pureplatterfoods.com")
        assert "Status: pending" in email["text"]
        assert "Total: GHS 120.00" in email["text"]
