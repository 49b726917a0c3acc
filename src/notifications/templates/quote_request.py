"""Quote request: a customer asked for a bulk-order quote."""

from html import escape

from notifications.notification.notification import NotificationType


class QuoteRequestTemplate:
    notification_type = NotificationType.QUOTE_REQUEST.value

    @staticmethod
    def render(context: dict) -> dict:
        name = context.get("name", "")
        fields = [
            ("Name", name),
            ("Email", context.get("email", "")),
            ("Phone", context.get("phone") or "Not provided"),
            ("Quantity", context.get("quantity") or "Not specified"),
            ("Message", context.get("message") or ""),
        ]
        return {
            "subject": f"New Quote Request from {name}",
            "body": "New quote request\n\n" + "\n".join(f"{label}: {value}" for label, value in fields),
            "html_body": (
                "<h1>New Quote Request</h1>"
                + "".join(f"<p><strong>{label}:</strong> {escape(str(value))}</p>" for label, value in fields)
            ),
        }
