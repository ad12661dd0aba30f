"""Tests for email templates: rendering and registry."""

import pytest
from notifications.templates import TEMPLATE_REGISTRY, get_template
from notifications.templates.fulfillment_request import FulfillmentRequestTemplate
from notifications.templates.kinds import NotificationType
from notifications.templates.order_received import OrderReceivedTemplate
from notifications.templates.shipping_update import ShippingUpdateTemplate

ORDER_CONTEXT = {
    "order_id": "ord-1",
    "order_code": "AB1234567",
    "store_name": "Test Store",
    "name": "Ada",
    "email": "ada@example.com",
    "phone": "555-0100",
    "total": 24.98,
    "currency": "USD",
    "payment_method": "cashapp",
    "payment_instructions": "Send $24.98 with Cash App.",
    "support_email": "help@teststore.example",
    "items": [{"name": "Logo Tee", "size": "M", "unit_price": 12.49, "quantity": 2}],
    "shipping_address": {
        "line1": "12 Analytical Way",
        "line2": None,
        "city": "Springfield",
        "state": "IL",
        "postal_code": "62701",
        "country": "US",
    },
}


class TestTemplateRegistry:
    def test_every_notification_type_has_a_template(self):
        for nt in NotificationType:
            assert nt.value in TEMPLATE_REGISTRY, f"Missing template for {nt.value}"

    def test_get_template_returns_correct_class(self):
        assert get_template(NotificationType.SHIPPING_UPDATE.value) is ShippingUpdateTemplate

    def test_get_template_unknown_type_raises(self):
        with pytest.raises(ValueError, match="No template registered"):
            get_template("NonexistentType")


class TestOrderReceivedTemplate:
    def test_includes_code_items_total_and_instructions(self):
        content = OrderReceivedTemplate.render(ORDER_CONTEXT)
        assert content["subject"] == "Order AB1234567 received"
        assert "Hi Ada," in content["body"]
        assert "2 x Logo Tee (M) @ USD 12.49" in content["body"]
        assert "Total: USD 24.98" in content["body"]
        assert "Send $24.98 with Cash App." in content["body"]
        assert "help@teststore.example" in content["body"]

    def test_html_is_escaped(self):
        content = OrderReceivedTemplate.render({**ORDER_CONTEXT, "name": "<script>"})
        assert "<script>" not in content["html"]
        assert "&lt;script&gt;" in content["html"]


class TestFulfillmentRequestTemplate:
    def test_includes_shipping_details(self):
        content = FulfillmentRequestTemplate.render(ORDER_CONTEXT)
        assert "AB1234567" in content["subject"]
        assert "12 Analytical Way" in content["body"]
        assert "Springfield IL 62701" in content["body"]
        assert "555-0100" in content["body"]


class TestShippingUpdateTemplate:
    def test_includes_tracking_link(self):
        content = ShippingUpdateTemplate.render(
            {
                "order_code": "AB1234567",
                "carrier": "UPS",
                "tracking_number": "1Z999",
                "tracking_url": "https://www.ups.com/track?tracknum=1Z999",
            }
        )
        assert "1Z999" in content["body"]
        assert "https://www.ups.com/track?tracknum=1Z999" in content["body"]

    def test_without_link_or_carrier(self):
        content = ShippingUpdateTemplate.render({"order_code": "AB1234567", "tracking_number": "T1"})
        assert "the carrier" in content["body"]
        assert "Track your package" not in content["body"]
