"""Tests for email channel adapters and the channel registry."""

import pytest
import requests
from notifications.channel import get_channel, reset_channels, set_channel
from notifications.channel.fake_email import FakeEmailAdapter
from notifications.channel.resend_email import RESEND_API_URL, ResendEmailAdapter
from notifications.notification.notification import NotificationChannel


class _FakeResponse:
    def __init__(self, status_code=200, body=None, text=""):
        self.status_code = status_code
        self._body = body or {}
        self.text = text

    def json(self):
        return self._body


class TestChannelRegistry:
    def test_defaults_to_fake_adapter(self):
        assert isinstance(get_channel(NotificationChannel.EMAIL.value), FakeEmailAdapter)

    def test_adapter_is_singleton(self):
        assert get_channel(NotificationChannel.EMAIL.value) is get_channel(NotificationChannel.EMAIL.value)

    def test_resend_selected_by_environment(self, monkeypatch):
        monkeypatch.setenv("EMAIL_ADAPTER", "resend")
        monkeypatch.setenv("RESEND_API_KEY", "re_test_123")
        reset_channels()
        assert isinstance(get_channel(NotificationChannel.EMAIL.value), ResendEmailAdapter)

    def test_unknown_channel_raises(self):
        with pytest.raises(ValueError):
            get_channel("Pigeon")

    def test_set_channel_overrides(self):
        adapter = FakeEmailAdapter()
        set_channel(NotificationChannel.EMAIL.value, adapter)
        assert get_channel(NotificationChannel.EMAIL.value) is adapter


class TestFakeEmailAdapter:
    def test_send_records_email(self):
        adapter = FakeEmailAdapter()
        result = adapter.send("shop@example.com", "ama@example.com", "Hi", None, "Hello", reply_to="kofi@example.com")
        assert result["status"] == "sent"
        assert result["message_id"].startswith("email-")
        assert adapter.sent_to("ama@example.com")[0]["reply_to"] == "kofi@example.com"

    def test_configured_failure(self):
        adapter = FakeEmailAdapter()
        adapter.configure(should_succeed=False, failure_reason="Mailbox full")
        result = adapter.send("shop@example.com", "ama@example.com", "Hi", None, "Hello")
        assert result == {"message_id": None, "status": "failed", "error": "Mailbox full"}
        assert adapter.attempts == 1
        assert adapter.sent_emails == []

    def test_reset(self):
        adapter = FakeEmailAdapter()
        adapter.configure(should_succeed=False)
        adapter.send("shop@example.com", "ama@example.com", "Hi", None, "Hello")
        adapter.reset()
        assert adapter.attempts == 0
        assert adapter.should_succeed is True


class TestResendEmailAdapter:
    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            ResendEmailAdapter(api_key="")

    def test_send_posts_payload(self, monkeypatch):
        adapter = ResendEmailAdapter(api_key="re_test_123")
        captured = {}

        def fake_post(url, json, timeout):
            captured.update(url=url, json=json, timeout=timeout)
            return _FakeResponse(body={"id": "msg_abc"})

        monkeypatch.setattr(adapter.session, "post", fake_post)
        result = adapter.send(
            "PurePlatter Foods <noreply@pureplatterfoods.com>",
            "ama@example.com",
            "Order Update",
            "<p>Shipped</p>",
            "Shipped",
            reply_to="orders@pureplatterfoods.com",
        )

        assert result == {"message_id": "msg_abc", "status": "sent"}
        assert captured["url"] == RESEND_API_URL
        assert captured["json"]["to"] == ["ama@example.com"]
        assert captured["json"]["html"] == "<p>Shipped</p>"
        assert captured["json"]["reply_to"] == "orders@pureplatterfoods.com"
        assert adapter.session.headers["Authorization"] == "Bearer re_test_123"

    def test_plain_text_only_omits_html(self, monkeypatch):
        adapter = ResendEmailAdapter(api_key="re_test_123")
        captured = {}

        def fake_post(url, json, timeout):
            captured.update(json=json)
            return _FakeResponse(body={"id": "msg_abc"})

        monkeypatch.setattr(adapter.session, "post", fake_post)
        adapter.send("shop@example.com", "ama@example.com", "Hi", None, "Hello")
        assert "html" not in captured["json"]
        assert "reply_to" not in captured["json"]

    def test_http_error_reported_as_failure(self, monkeypatch):
        adapter = ResendEmailAdapter(api_key="re_test_123")
        monkeypatch.setattr(
            adapter.session, "post", lambda url, json, timeout: _FakeResponse(status_code=422, text="invalid from")
        )
        result = adapter.send("shop@example.com", "ama@example.com", "Hi", None, "Hello")
        assert result["status"] == "failed"
        assert result["error"] == "Resend returned HTTP 422"

    def test_network_error_reported_as_failure(self, monkeypatch):
        adapter = ResendEmailAdapter(api_key="re_test_123")

        def boom(url, json, timeout):
            raise requests.ConnectionError("connection reset")

        monkeypatch.setattr(adapter.session, "post", boom)
        result = adapter.send("shop@example.com", "ama@example.com", "Hi", None, "Hello")
        assert result["status"] == "failed"
        assert "connection reset" in result["error"]
