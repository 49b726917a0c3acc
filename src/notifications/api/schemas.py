"""Pydantic request/response models for the Notifications API.

API schemas are separate from Protean commands (anti-corruption pattern).
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------
class ContactMessageRequest(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100, alias="firstName")
    last_name: str = Field(..., min_length=1, max_length=100, alias="lastName")
    email: str = Field(..., max_length=254)
    phone: str | None = None
    subject: str | None = None
    message: str = Field(..., min_length=1)

    model_config = {"populate_by_name": True}


class QuoteRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., max_length=254)
    phone: str | None = None
    quantity: str | None = None
    message: str | None = None


class NotifyAdminOrderRequest(BaseModel):
    """The order as returned by ``POST /orders``."""

    id: str = Field(..., description="Order ID")
    user_full_name: str | None = None
    user_email: str | None = None
    user_phone: str | None = None
    status: str | None = None
    total_amount: float | None = None
    delivery_address: str | None = None
    delivery_city: str | None = None


class DispatchRequest(BaseModel):
    limit: int | None = Field(None, ge=1)


class CancelNotificationRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    success: bool = True


class QueuedResponse(BaseModel):
    success: bool = True
    message: str


class NotificationResponse(BaseModel):
    notification_id: str
    recipient: str
    recipient_type: str
    notification_type: str
    channel: str
    subject: str | None = None
    status: str
    retry_count: int
    max_retries: int
    failure_reason: str | None = None
    sent_at: str | None = None
    created_at: str | None = None


class NotificationListResponse(BaseModel):
    success: bool = True
    notifications: list[NotificationResponse]


class SingleNotificationResponse(BaseModel):
    success: bool = True
    notification: NotificationResponse


class DispatchResponse(BaseModel):
    success: bool = True
    sent: int
    failed: int
    exhausted: int
