"""Fulfillment request template: sent to the fulfillment contact with shipping details."""

from notifications.templates.formatting import (
    address_lines,
    item_lines,
    money,
    paragraphs_to_html,
)
from notifications.templates.kinds import NotificationType


class FulfillmentRequestTemplate:
    notification_type = NotificationType.FULFILLMENT_REQUEST.value

    @staticmethod
    def render(context: dict) -> dict:
        order_code = context.get("order_code", "N/A")
        currency = context.get("currency", "USD")
        contact = [
            line
            for line in (context.get("name"), context.get("email"), context.get("phone"))
            if line
        ]
        body = (
            f"New order {order_code} ({context.get('payment_method', 'unknown')}, "
            f"{money(context.get('total'), currency)}).\n\n"
            "Ship to:\n" + "\n".join(contact + address_lines(context.get("shipping_address"))) + "\n\n"
            "Items:\n" + "\n".join(item_lines(context.get("items", []), currency)) + "\n\n"
            "Hold shipment until payment is confirmed."
        )
        return {
            "subject": f"Fulfillment request: order {order_code}",
            "body": body,
            "html": paragraphs_to_html(body),
        }
