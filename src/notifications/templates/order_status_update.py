"""Order status update template: sent to the customer when an admin moves their order."""

from html import escape

from notifications.notification.notification import NotificationType

STATUS_MESSAGES = {
    "confirmed": "Your order has been confirmed and is being prepared.",
    "shipped": "Great news! Your order has been shipped and is on its way.",
    "delivered": "Your order has been delivered. We hope you enjoy your rice!",
    "cancelled": "Unfortunately, your order has been cancelled.",
}
DEFAULT_MESSAGE = "Your order status has been updated."


class OrderStatusUpdateTemplate:
    notification_type = NotificationType.ORDER_STATUS_UPDATE.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = str(context.get("order_id", ""))
        short_id = order_id[-8:]
        status = context.get("new_status", "")
        status_label = status.capitalize()
        message = STATUS_MESSAGES.get(status, DEFAULT_MESSAGE)
        tracking_number = context.get("tracking_number")
        orders_url = context.get("orders_url")

        tracking_line = f"Tracking Number: {tracking_number}\n\n" if tracking_number else ""
        tracking_html = (
            f'<p style="color: #666;">Tracking Number: {escape(tracking_number)}</p>' if tracking_number else ""
        )
        link_html = (
            f'<p style="text-align: center;"><a href="{escape(orders_url)}">View Order Details</a></p>'
            if orders_url
            else ""
        )

        return {
            "subject": f"Order Update - {order_id}",
            "body": (
                "Hello! We have an update on your order.\n\n"
                f"Order #{short_id}\n"
                f"Status: {status_label}\n\n"
                f"{message}\n\n"
                f"{tracking_line}"
                "Thank you for choosing PureGrain Rice!"
            ),
            "html_body": (
                '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
                "<h1>Order Update</h1>"
                "<p>Hello! We have an update on your order.</p>"
                f"<h2>Order #{escape(short_id)}</h2>"
                f"<p><strong>Status: {escape(status_label)}</strong></p>"
                f"<p>{escape(message)}</p>"
                f"{tracking_html}"
                f"{link_html}"
                "<p>Thank you for choosing PureGrain Rice!</p>"
                "</div>"
            ),
        }
