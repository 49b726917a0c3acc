"""Fixtures for cross-domain integration tests.

Events raised by the Ordering domain are read back from its event store and
handed to the consuming domains' handlers, the way the Engine delivers them
in production.
"""

import pytest


def _reset(domain):
    for _, provider in domain.providers.items():
        provider._data_reset()
    for _, broker in domain.brokers.items():
        broker._data_reset()
    domain.event_store.store._data_reset()


@pytest.fixture
def ordering_ctx():
    """Push the ordering domain context for a test, with cleanup."""
    from ordering.domain import ordering

    with ordering.domain_context():
        yield ordering
        _reset(ordering)


@pytest.fixture
def notifications_ctx(monkeypatch):
    from notifications.channel import reset_channels
    from notifications.domain import notifications

    monkeypatch.setenv("ADMIN_EMAIL", "orders@pureplatterfoods.com")
    monkeypatch.delenv("EMAIL_ADAPTER", raising=False)
    reset_channels()

    yield notifications

    with notifications.domain_context():
        _reset(notifications)
    reset_channels()


@pytest.fixture
def reviews_ctx():
    from reviews.domain import reviews

    yield reviews

    with reviews.domain_context():
        _reset(reviews)
