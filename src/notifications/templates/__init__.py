"""Template registry: maps NotificationType to template classes.

Each template renders subject, plain-text body and HTML from a context dict.
"""

from notifications.templates.fulfillment_request import FulfillmentRequestTemplate
from notifications.templates.kinds import NotificationType
from notifications.templates.order_received import OrderReceivedTemplate
from notifications.templates.shipping_update import ShippingUpdateTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationType.ORDER_RECEIVED.value: OrderReceivedTemplate,
    NotificationType.FULFILLMENT_REQUEST.value: FulfillmentRequestTemplate,
    NotificationType.SHIPPING_UPDATE.value: ShippingUpdateTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
