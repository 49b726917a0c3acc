"""FastAPI routes for the Notifications domain.

Thin adapters that translate HTTP requests into domain commands.
No business logic, just schema→command→response translation.
"""

from fastapi import APIRouter, Depends
from notifications.api.schemas import (
    CancelNotificationRequest,
    ContactMessageRequest,
    DispatchRequest,
    DispatchResponse,
    NotificationListResponse,
    NotificationResponse,
    NotifyAdminOrderRequest,
    QueuedResponse,
    QuoteRequest,
    SingleNotificationResponse,
)
from notifications.notification.cancellation import CancelNotification
from notifications.notification.inquiries import (
    NotifyAdminOfOrder,
    RequestQuote,
    SubmitContactMessage,
)
from notifications.notification.notification import Notification
from notifications.notification.outbox import DispatchPendingNotifications
from notifications.notification.retry import RetryNotification
from protean.utils.globals import current_domain
from shared.auth import AuthenticatedUser, admin_user, current_user

router = APIRouter(prefix="/notifications", tags=["notifications"])
inquiry_router = APIRouter(tags=["inquiries"])


def _notification_response(data: dict) -> NotificationResponse:
    return NotificationResponse(**{field: data.get(field) for field in NotificationResponse.model_fields})


# ---------------------------------------------------------------------------
# Inquiries
# ---------------------------------------------------------------------------
@inquiry_router.post("/contact", status_code=201, response_model=QueuedResponse)
async def submit_contact_message(body: ContactMessageRequest) -> QueuedResponse:
    """Forward a contact-form message to the shop inbox."""
    command = SubmitContactMessage(
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        phone=body.phone,
        subject=body.subject,
        message=body.message,
    )
    current_domain.process(command, asynchronous=False)
    return QueuedResponse(message="Message sent successfully")


@inquiry_router.post("/quote", status_code=201, response_model=QueuedResponse)
async def request_quote(body: QuoteRequest) -> QueuedResponse:
    """Forward a bulk-order quote request and acknowledge it to the sender."""
    command = RequestQuote(
        name=body.name,
        email=body.email,
        phone=body.phone,
        quantity=body.quantity,
        message=body.message,
    )
    current_domain.process(command, asynchronous=False)
    return QueuedResponse(message="Quote request sent successfully")


@inquiry_router.post("/notify-admin-order", status_code=201, response_model=QueuedResponse)
async def notify_admin_order(
    body: NotifyAdminOrderRequest,
    user: AuthenticatedUser = Depends(current_user),
) -> QueuedResponse:
    """Alert the shop inbox about an order just placed by the caller."""
    command = NotifyAdminOfOrder(
        order_id=body.id,
        user_full_name=body.user_full_name,
        user_email=body.user_email or user.email,
        user_phone=body.user_phone,
        status=body.status,
        total_amount=body.total_amount,
        delivery_address=body.delivery_address,
        delivery_city=body.delivery_city,
    )
    current_domain.process(command, asynchronous=False)
    return QueuedResponse(message="Admin notified")


# ---------------------------------------------------------------------------
# Outbox administration
# ---------------------------------------------------------------------------
@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    status: str | None = None,
    admin: AuthenticatedUser = Depends(admin_user),
) -> NotificationListResponse:
    """List outbox records, newest first, optionally filtered by status."""
    repo = current_domain.repository_for(Notification)
    query = repo._dao.query
    if status:
        query = query.filter(status=status)
    results = query.order_by("-created_at").all().items
    return NotificationListResponse(
        notifications=[_notification_response(n.to_dict()) for n in results],
    )


@router.post("/dispatch", response_model=DispatchResponse)
async def dispatch_notifications(
    body: DispatchRequest | None = None,
    admin: AuthenticatedUser = Depends(admin_user),
) -> DispatchResponse:
    """Run the outbox worker once."""
    command = DispatchPendingNotifications(limit=body.limit if body else None)
    summary = current_domain.process(command, asynchronous=False)
    return DispatchResponse(**summary)


@router.put("/{notification_id}/retry", response_model=SingleNotificationResponse)
async def retry_notification(
    notification_id: str,
    admin: AuthenticatedUser = Depends(admin_user),
) -> SingleNotificationResponse:
    """Retry a failed notification now."""
    command = RetryNotification(notification_id=notification_id)
    result = current_domain.process(command, asynchronous=False)
    return SingleNotificationResponse(notification=_notification_response(result))


@router.put("/{notification_id}/cancel", response_model=SingleNotificationResponse)
async def cancel_notification(
    notification_id: str,
    body: CancelNotificationRequest | None = None,
    admin: AuthenticatedUser = Depends(admin_user),
) -> SingleNotificationResponse:
    """Cancel a pending notification."""
    command = CancelNotification(notification_id=notification_id, reason=body.reason if body else None)
    result = current_domain.process(command, asynchronous=False)
    return SingleNotificationResponse(notification=_notification_response(result))
