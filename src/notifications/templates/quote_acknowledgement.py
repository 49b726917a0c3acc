"""Quote acknowledgement: confirms to the customer that their quote request arrived."""

from html import escape

from notifications.notification.notification import NotificationType


class QuoteAcknowledgementTemplate:
    notification_type = NotificationType.QUOTE_ACKNOWLEDGEMENT.value

    @staticmethod
    def render(context: dict) -> dict:
        name = context.get("name", "there")
        quantity = context.get("quantity") or "Not specified"
        return {
            "subject": "Quote Request Confirmation - We'll be in touch soon!",
            "body": (
                f"Hi {name},\n\n"
                "Thank you for your quote request! We've successfully received your submission "
                "and will get back to you within 24 hours.\n\n"
                f"Requested quantity: {quantity}\n\n"
                "Thank you for your interest in our products!"
            ),
            "html_body": (
                f"<p>Hi {escape(name)},</p>"
                "<p>Thank you for your quote request! We've successfully received your submission "
                "and will get back to you within 24 hours.</p>"
                f"<p><strong>Requested quantity:</strong> {escape(str(quantity))}</p>"
                "<p>Thank you for your interest in our products!</p>"
            ),
        }
