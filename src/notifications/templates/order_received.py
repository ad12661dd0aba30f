"""Order received template: sent to the customer when an order is placed.

Carries the payment instructions for the chosen method; the order stays
pending until payment is confirmed.
"""

from notifications.templates.formatting import item_lines, money, paragraphs_to_html
from notifications.templates.kinds import NotificationType


class OrderReceivedTemplate:
    notification_type = NotificationType.ORDER_RECEIVED.value

    @staticmethod
    def render(context: dict) -> dict:
        store_name = context.get("store_name", "our store")
        order_code = context.get("order_code", "N/A")
        currency = context.get("currency", "USD")
        greeting = f"Hi {context['name']}," if context.get("name") else "Hi,"
        items = "\n".join(item_lines(context.get("items", []), currency))
        instructions = context.get("payment_instructions") or "We'll follow up with payment details."

        body = (
            f"{greeting}\n\n"
            f"Thanks for your order with {store_name}! Your order number is {order_code}.\n\n"
            f"{items}\n"
            f"Total: {money(context.get('total'), currency)}\n\n"
            f"How to pay:\n{instructions}\n\n"
            "Your order ships once payment is confirmed."
        )
        if context.get("support_email"):
            body += f"\n\nQuestions? Reply to {context['support_email']}."

        return {
            "subject": f"Order {order_code} received",
            "body": body,
            "html": paragraphs_to_html(body),
        }
