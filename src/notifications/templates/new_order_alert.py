"""New order alert: sent to the shop when a customer places an order."""

from notifications.notification.notification import NotificationType


class NewOrderAlertTemplate:
    notification_type = NotificationType.NEW_ORDER_ALERT.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        lines = [
            "A new order has been placed.",
            "",
            f"Order ID: {order_id}",
            f"Customer: {context.get('user_full_name') or 'N/A'}",
            f"Email: {context.get('user_email') or 'N/A'}",
            f"Phone: {context.get('user_phone') or 'N/A'}",
            f"Status: {context.get('status') or 'pending'}",
        ]
        if context.get("total_amount") is not None:
            lines.append(f"Total: GHS {float(context['total_amount']):.2f}")
        if context.get("delivery_city"):
            lines.append(f"Delivery: {context.get('delivery_address') or ''}, {context['delivery_city']}")
        lines += ["", "Please check the admin dashboard for full details."]

        return {
            "subject": f"New Order Placed: #{order_id}",
            "body": "\n".join(lines),
        }
