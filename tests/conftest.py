import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Initialize every domain and push the Ordering domain context, so that `current_domain` is available outside of
    the per-context fixtures.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from notifications.domain import notifications
    from ordering.domain import ordering
    from reviews.domain import reviews

    notifications.init()
    reviews.init()
    ordering.init()
    ordering.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session", autouse=True)
def setup_db(request):
    from notifications.domain import notifications
    from ordering.domain import ordering
    from reviews.domain import reviews
    from shared.db import drop_db, setup_db

    for domain in (ordering, notifications, reviews):
        setup_db(domain)

    yield

    for domain in (ordering, notifications, reviews):
        drop_db(domain)
