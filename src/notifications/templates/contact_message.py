"""Contact message: a storefront visitor wrote to the shop."""

from notifications.notification.notification import NotificationType


class ContactMessageTemplate:
    notification_type = NotificationType.CONTACT_MESSAGE.value

    @staticmethod
    def render(context: dict) -> dict:
        subject = context.get("subject") or "General enquiry"
        return {
            "subject": f"New Contact Message: {subject}",
            "body": (
                f"Name: {context.get('first_name', '')} {context.get('last_name', '')}\n"
                f"Email: {context.get('email', '')}\n"
                f"Phone: {context.get('phone') or 'Not provided'}\n"
                f"Subject: {subject}\n"
                "Message:\n"
                f"{context.get('message', '')}"
            ),
        }
