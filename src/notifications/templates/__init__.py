"""Template registry: maps NotificationType to template classes.

Each template renders a subject, a plain-text body and optionally an HTML
body from the context data stored on the notification.
"""

from notifications.notification.notification import NotificationType
from notifications.templates.contact_message import ContactMessageTemplate
from notifications.templates.new_order_alert import NewOrderAlertTemplate
from notifications.templates.order_status_update import OrderStatusUpdateTemplate
from notifications.templates.quote_acknowledgement import QuoteAcknowledgementTemplate
from notifications.templates.quote_request import QuoteRequestTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationType.ORDER_STATUS_UPDATE.value: OrderStatusUpdateTemplate,
    NotificationType.NEW_ORDER_ALERT.value: NewOrderAlertTemplate,
    NotificationType.CONTACT_MESSAGE.value: ContactMessageTemplate,
    NotificationType.QUOTE_REQUEST.value: QuoteRequestTemplate,
    NotificationType.QUOTE_ACKNOWLEDGEMENT.value: QuoteAcknowledgementTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
