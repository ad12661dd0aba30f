"""Shipping update template: sent when tracking is assigned to an order."""

from notifications.templates.formatting import paragraphs_to_html
from notifications.templates.kinds import NotificationType


class ShippingUpdateTemplate:
    notification_type = NotificationType.SHIPPING_UPDATE.value

    @staticmethod
    def render(context: dict) -> dict:
        order_code = context.get("order_code", "N/A")
        carrier = context.get("carrier") or "the carrier"
        tracking_number = context.get("tracking_number", "N/A")
        tracking_url = context.get("tracking_url")

        body = (
            f"Great news! Your order {order_code} has shipped.\n\n"
            f"Carrier: {carrier}\n"
            f"Tracking Number: {tracking_number}"
        )
        if tracking_url:
            body += f"\nTrack your package: {tracking_url}"
        body += f"\n\nThank you for shopping with {context.get('store_name', 'us')}!"

        return {
            "subject": f"Your order {order_code} has shipped",
            "body": body,
            "html": paragraphs_to_html(body),
        }
