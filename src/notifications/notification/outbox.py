"""DispatchPendingNotifications command + handler: the outbox worker.

Invoked by a background job (``python src/manage.py dispatch-notifications``)
or the admin API. Sends every PENDING notification and retries FAILED ones
that still have attempts left.
"""

import structlog
from notifications.domain import notifications
from notifications.notification.dispatch import dispatch_notification
from notifications.notification.notification import Notification, NotificationStatus
from protean.fields import Integer
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

logger = structlog.get_logger(__name__)


@notifications.command(part_of="Notification")
class DispatchPendingNotifications:
    """Request to work through the outbox."""

    limit: Integer(min_value=1)  # Optional: cap on notifications handled per run


@notifications.command_handler(part_of=Notification)
class DispatchPendingNotificationsHandler:
    @handle(DispatchPendingNotifications)
    def dispatch_pending(self, command: DispatchPendingNotifications):
        repo = current_domain.repository_for(Notification)

        pending = repo._dao.query.filter(status=NotificationStatus.PENDING.value).all().items
        failed = repo._dao.query.filter(status=NotificationStatus.FAILED.value).all().items
        queue = sorted(
            list(pending) + [n for n in failed if n.can_retry],
            key=lambda n: n.created_at,
        )
        if command.limit:
            queue = queue[: command.limit]

        summary = {"sent": 0, "failed": 0, "exhausted": sum(1 for n in failed if not n.can_retry)}

        for record in queue:
            notification = repo.get(record.id)
            if NotificationStatus(notification.status) == NotificationStatus.FAILED:
                notification.retry()

            if dispatch_notification(notification):
                summary["sent"] += 1
            else:
                summary["failed"] += 1
            repo.add(notification)

        logger.info("Outbox processed", **summary)
        return summary
