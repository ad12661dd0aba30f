"""Domain events for the Order aggregate.

Each lifecycle change raises one immutable, versioned fact. They are written
to the event store alongside the order for audit.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A customer submitted an order; it now awaits payment."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_code = String(required=True, max_length=9)
    email = String(required=True, max_length=254)
    payment_method = String(required=True, max_length=50)
    total = Float(required=True)
    client_total = Float()
    total_flagged = Boolean(default=False)
    item_count = Integer(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PaymentProofAttached:
    """An image of the payment was uploaded for the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    proof_reference = Text(required=True)
    marked_paid = Boolean(default=False)
    attached_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPaid:
    """Payment for the order was confirmed."""

    __version__ = 1

    order_id = Identifier(required=True)
    confirmed_by = String(required=True, max_length=50)
    paid_at = DateTime(required=True)


@ordering.event(part_of="Order")
class TrackingAssigned:
    """A carrier tracking number was recorded; the order has shipped."""

    __version__ = 1

    order_id = Identifier(required=True)
    carrier = String(max_length=100)
    tracking_number = String(required=True, max_length=255)
    tracking_url = String(max_length=1024)
    reassigned = Boolean(default=False)
    shipped_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled before shipping."""

    __version__ = 1

    order_id = Identifier(required=True)
    reason = String(max_length=500)
    cancelled_at = DateTime(required=True)
