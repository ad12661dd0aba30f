"""Order aggregate: the core of the ordering domain.

State Machine:
    PENDING → PAID → SHIPPED
    PENDING / PAID → CANCELLED

A proof upload may move PENDING straight to PAID when that policy is on.
Re-assigning tracking on a SHIPPED order overwrites the previous tracking
details instead of adding a second shipment.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.errors import InvalidTransitionError
from ordering.order.address import ADDRESS_FIELDS
from ordering.order.events import (
    OrderCancelled,
    OrderPaid,
    OrderPlaced,
    PaymentProofAttached,
    TrackingAssigned,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    SHIPPED = "shipped"
    CANCELLED = "cancelled"


class PaymentConfirmation(Enum):
    OPERATOR = "operator"
    PROOF = "proof"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.SHIPPED},  # Tracking re-assignment
    OrderStatus.CANCELLED: set(),  # Terminal
}

# States in which payment has already been settled
_SETTLED_STATES = {OrderStatus.PAID, OrderStatus.SHIPPED}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class Address:
    """A normalized postal address captured when the order is placed.

    Orders keep their own copy; the raw request shape is not retained.
    """

    line1 = String(required=True, max_length=255)
    line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class LineItem:
    """One product line in the cart: what, which size, how many and at what price."""

    name = String(required=True, max_length=255)
    sku = String(max_length=100)
    size = String(max_length=50)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    line_total = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_code = String(required=True, max_length=9, unique=True)
    email = String(required=True, max_length=254)
    name = String(max_length=255)
    phone = String(max_length=50)
    shipping_address = ValueObject(Address)
    billing_address = ValueObject(Address)
    items = HasMany(LineItem)
    total = Float(required=True, min_value=0.0)
    client_total = Float()
    total_flagged = Boolean(default=False)
    currency = String(max_length=3, default="USD")
    payment_method = String(required=True, max_length=50)
    payment_proof = Text()
    proof_submitted_at = DateTime()
    carrier = String(max_length=100)
    tracking_number = String(max_length=255)
    tracking_url = String(max_length=1024)
    cancellation_reason = String(max_length=500)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    created_at = DateTime()
    updated_at = DateTime()
    paid_at = DateTime()
    shipped_at = DateTime()

    @invariant.post
    def total_cannot_be_negative(self):
        if self.total is not None and self.total < 0:
            raise ValidationError({"total": ["Order total cannot be negative"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_code,
        email,
        items_data,
        shipping_address,
        payment_method,
        total,
        billing_address=None,
        name=None,
        phone=None,
        client_total=None,
        total_flagged=False,
        currency="USD",
    ):
        """Create a pending order from a validated submission.

        Args:
            order_code: Human-readable code. The store rejects duplicates.
            items_data: List of dicts with name, sku, size, unit_price,
                        quantity, line_total.
            shipping_address: Normalized address dict.
            billing_address: Normalized address dict; defaults to shipping.
            total: Server-computed total.
            client_total: Total the client claimed, kept for audit.
        """
        now = datetime.now(UTC)

        order = cls(
            order_code=order_code,
            email=email,
            name=name,
            phone=phone,
            shipping_address=Address(**shipping_address),
            billing_address=Address(**(billing_address or shipping_address)),
            items=[LineItem(**item) for item in items_data],
            total=total,
            client_total=client_total,
            total_flagged=total_flagged,
            currency=currency,
            payment_method=payment_method,
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_code=order_code,
                email=email,
                payment_method=payment_method,
                total=total,
                client_total=client_total,
                total_flagged=total_flagged,
                item_count=sum(item["quantity"] for item in items_data),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransitionError(current.value, target_status.value)

    @property
    def is_settled(self):
        return OrderStatus(self.status) in _SETTLED_STATES

    def summary(self):
        """Plain-dict view of the order for responses and email templates."""

        def _address(address):
            if address is None:
                return None
            return {field: getattr(address, field) for field in ADDRESS_FIELDS}

        return {
            "order_id": str(self.id),
            "order_code": self.order_code,
            "email": self.email,
            "name": self.name,
            "phone": self.phone,
            "status": self.status,
            "total": self.total,
            "client_total": self.client_total,
            "total_flagged": self.total_flagged,
            "currency": self.currency,
            "payment_method": self.payment_method,
            "payment_proof": self.payment_proof,
            "carrier": self.carrier,
            "tracking_number": self.tracking_number,
            "tracking_url": self.tracking_url,
            "shipping_address": _address(self.shipping_address),
            "billing_address": _address(self.billing_address),
            "items": [
                {
                    "name": item.name,
                    "sku": item.sku,
                    "size": item.size,
                    "unit_price": item.unit_price,
                    "quantity": item.quantity,
                    "line_total": item.line_total,
                }
                for item in self.items or []
            ],
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def attach_proof(self, reference, mark_paid=False):
        """Record a payment-proof reference. Returns True when the status changed.

        The proof is advisory; nothing here checks it against the total.
        """
        current = OrderStatus(self.status)
        if current == OrderStatus.CANCELLED:
            raise InvalidTransitionError(current.value, OrderStatus.PAID.value)

        now = datetime.now(UTC)
        self.payment_proof = reference
        self.proof_submitted_at = now
        self.updated_at = now

        status_changed = False
        if mark_paid and current == OrderStatus.PENDING:
            self.status = OrderStatus.PAID.value
            self.paid_at = now
            status_changed = True

        self.raise_(
            PaymentProofAttached(
                order_id=str(self.id),
                proof_reference=reference,
                marked_paid=status_changed,
                attached_at=now,
            )
        )
        return status_changed

    def mark_paid(self, confirmed_by=PaymentConfirmation.OPERATOR.value, proof=None):
        """Confirm payment. Returns True when the status changed.

        Replaying the confirmation on a paid or shipped order is a no-op.
        """
        if self.is_settled:
            return False

        self._assert_can_transition(OrderStatus.PAID)

        now = datetime.now(UTC)
        if proof:
            self.payment_proof = proof
            self.proof_submitted_at = now
        self.status = OrderStatus.PAID.value
        self.paid_at = now
        self.updated_at = now

        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                confirmed_by=confirmed_by,
                paid_at=now,
            )
        )
        return True

    def assign_tracking(self, tracking_number, carrier=None, tracking_url=None):
        """Record carrier tracking and mark the order shipped.

        Calling this again overwrites the earlier tracking details.
        """
        self._assert_can_transition(OrderStatus.SHIPPED)

        reassigned = OrderStatus(self.status) == OrderStatus.SHIPPED
        now = datetime.now(UTC)

        self.carrier = carrier
        self.tracking_number = tracking_number
        self.tracking_url = tracking_url
        self.status = OrderStatus.SHIPPED.value
        if not reassigned:
            self.shipped_at = now
        self.updated_at = now

        self.raise_(
            TrackingAssigned(
                order_id=str(self.id),
                carrier=carrier,
                tracking_number=tracking_number,
                tracking_url=tracking_url,
                reassigned=reassigned,
                shipped_at=now,
            )
        )

    def cancel(self, reason=None):
        """Cancel an order that has not shipped yet."""
        self._assert_can_transition(OrderStatus.CANCELLED)

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancellation_reason = reason
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                reason=reason,
                cancelled_at=now,
            )
        )
