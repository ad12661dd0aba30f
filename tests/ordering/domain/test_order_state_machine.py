"""Tests for Order state machine: valid transitions and invalid transition guards."""

import pytest
from ordering.errors import InvalidTransitionError
from ordering.order.events import (
    OrderCancelled,
    OrderPaid,
    PaymentProofAttached,
    TrackingAssigned,
)
from ordering.order.order import Order, OrderStatus


def _make_order():
    return Order.place(
        order_code="QX7654321",
        email="ada@example.com",
        items_data=[
            {"name": "Mug", "sku": "MUG", "size": None, "unit_price": 10.0, "quantity": 1, "line_total": 10.0},
        ],
        shipping_address={
            "line1": "1 St",
            "line2": None,
            "city": "C",
            "state": "S",
            "postal_code": "00000",
            "country": "US",
        },
        payment_method="venmo",
        total=10.0,
    )


def _order_at_state(target_status):
    """Create an order and advance it to the desired state."""
    order = _make_order()
    order._events.clear()

    if target_status == OrderStatus.PENDING:
        return order

    if target_status == OrderStatus.CANCELLED:
        order.cancel("test")
        order._events.clear()
        return order

    order.mark_paid()
    order._events.clear()
    if target_status == OrderStatus.PAID:
        return order

    order.assign_tracking("9400100000000000000000", carrier="USPS")
    order._events.clear()
    return order


class TestMarkPaid:
    def test_pending_to_paid(self):
        order = _order_at_state(OrderStatus.PENDING)
        assert order.mark_paid() is True
        assert order.status == OrderStatus.PAID.value
        assert order.paid_at is not None
        assert isinstance(order._events[-1], OrderPaid)

    def test_proof_passed_with_confirmation_is_stored(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.mark_paid(proof="bank-ref-42")
        assert order.payment_proof == "bank-ref-42"

    @pytest.mark.parametrize("status", [OrderStatus.PAID, OrderStatus.SHIPPED])
    def test_replay_on_settled_order_is_noop(self, status):
        order = _order_at_state(status)
        assert order.mark_paid() is False
        assert order.status == status.value
        assert order._events == []

    def test_cancelled_order_cannot_be_paid(self):
        order = _order_at_state(OrderStatus.CANCELLED)
        with pytest.raises(InvalidTransitionError) as exc:
            order.mark_paid()
        assert exc.value.current_status == "cancelled"
        assert exc.value.target_status == "paid"


class TestAttachProof:
    def test_proof_alone_keeps_order_pending(self):
        order = _order_at_state(OrderStatus.PENDING)
        changed = order.attach_proof("QX7654321-1700000000000.png")
        assert changed is False
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_proof == "QX7654321-1700000000000.png"
        assert order.proof_submitted_at is not None

    def test_proof_can_mark_pending_order_paid(self):
        order = _order_at_state(OrderStatus.PENDING)
        assert order.attach_proof("key.png", mark_paid=True) is True
        assert order.status == OrderStatus.PAID.value
        event = order._events[-1]
        assert isinstance(event, PaymentProofAttached)
        assert event.marked_paid is True

    def test_proof_on_paid_order_does_not_change_status(self):
        order = _order_at_state(OrderStatus.PAID)
        assert order.attach_proof("late.png", mark_paid=True) is False
        assert order.status == OrderStatus.PAID.value

    def test_proof_on_cancelled_order_is_rejected(self):
        order = _order_at_state(OrderStatus.CANCELLED)
        with pytest.raises(InvalidTransitionError):
            order.attach_proof("key.png")


class TestAssignTracking:
    def test_paid_to_shipped(self):
        order = _order_at_state(OrderStatus.PAID)
        order.assign_tracking("1Z999", carrier="UPS", tracking_url="https://ups.example/1Z999")
        assert order.status == OrderStatus.SHIPPED.value
        assert order.tracking_number == "1Z999"
        assert order.shipped_at is not None
        event = order._events[-1]
        assert isinstance(event, TrackingAssigned)
        assert event.reassigned is False

    def test_pending_order_cannot_ship(self):
        order = _order_at_state(OrderStatus.PENDING)
        with pytest.raises(InvalidTransitionError):
            order.assign_tracking("1Z999")

    def test_reassignment_overwrites_previous_tracking(self):
        order = _order_at_state(OrderStatus.SHIPPED)
        first_shipped_at = order.shipped_at

        order.assign_tracking("SECOND", carrier="FedEx")

        assert order.tracking_number == "SECOND"
        assert order.carrier == "FedEx"
        assert order.tracking_url is None
        assert order.shipped_at == first_shipped_at
        assert order._events[-1].reassigned is True


class TestCancel:
    @pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.PAID])
    def test_unshipped_orders_can_be_cancelled(self, status):
        order = _order_at_state(status)
        order.cancel("customer request")
        assert order.status == OrderStatus.CANCELLED.value
        assert order.cancellation_reason == "customer request"
        assert isinstance(order._events[-1], OrderCancelled)

    @pytest.mark.parametrize("status", [OrderStatus.SHIPPED, OrderStatus.CANCELLED])
    def test_shipped_or_cancelled_orders_cannot_be_cancelled(self, status):
        order = _order_at_state(status)
        with pytest.raises(InvalidTransitionError):
            order.cancel()


class TestIdentityIsStable:
    def test_transitions_never_touch_id_or_code(self):
        order = _order_at_state(OrderStatus.PENDING)
        order_id, code = order.id, order.order_code

        order.mark_paid()
        order.assign_tracking("T1")
        order.assign_tracking("T2")

        assert order.id == order_id
        assert order.order_code == code
