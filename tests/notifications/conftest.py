import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def notifications_bed():
    from notifications.domain import notifications

    bed = DomainFixture(notifications)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(notifications_bed):
    with notifications_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


ADMIN_INBOX = "orders@pureplatterfoods.com"


@pytest.fixture(autouse=True)
def _notification_env(monkeypatch):
    """Fresh fake email adapter and a configured shop inbox for every test."""
    from notifications.channel import reset_channels

    monkeypatch.setenv("ADMIN_EMAIL", ADMIN_INBOX)
    monkeypatch.delenv("EMAIL_ADAPTER", raising=False)
    reset_channels()
    yield
    reset_channels()


@pytest.fixture()
def email_adapter():
    from notifications.channel import get_channel
    from notifications.notification.notification import NotificationChannel

    return get_channel(NotificationChannel.EMAIL.value)
