"""Notifications bounded context: the outbound email outbox.

Every outbound message (admin alerts for new orders, customer status
updates, contact and quote inquiries) is recorded as a Notification before
it is sent. The dispatcher delivers new notifications through the email
channel; a worker re-sends pending ones and retries failures.
"""

import structlog
from protean.domain import Domain

notifications = Domain(name="notifications")

logger = structlog.get_logger(__name__)
