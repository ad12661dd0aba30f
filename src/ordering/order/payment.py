"""Order payment: commands and handler.

Payment is confirmed either by an operator or, when the store allows it,
by the customer uploading a proof image.
"""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, PaymentConfirmation

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class MarkOrderPaid:
    """Operator confirmation that the payment arrived."""

    order_id = Identifier(required=True)
    payment_proof = Text()
    confirmed_by = String(max_length=50, default=PaymentConfirmation.OPERATOR.value)


@ordering.command(part_of="Order")
class AttachPaymentProof:
    """Record where the customer's proof-of-payment image is stored."""

    order_id = Identifier(required=True)
    proof_reference = Text(required=True)
    mark_paid = Boolean(default=False)


@ordering.command_handler(part_of=Order)
class RecordPaymentHandler:
    @handle(MarkOrderPaid)
    def mark_paid(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        changed = order.mark_paid(
            confirmed_by=command.confirmed_by or PaymentConfirmation.OPERATOR.value,
            proof=command.payment_proof,
        )
        if changed:
            repo.add(order)
            logger.info("order.paid", order_id=str(order.id), confirmed_by=command.confirmed_by)
        else:
            logger.info("order.paid.replayed", order_id=str(order.id), status=order.status)
        return {**order.summary(), "changed": changed}

    @handle(AttachPaymentProof)
    def attach_proof(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        changed = order.attach_proof(command.proof_reference, mark_paid=bool(command.mark_paid))
        repo.add(order)
        logger.info(
            "order.proof_attached",
            order_id=str(order.id),
            proof_reference=command.proof_reference,
            marked_paid=changed,
        )
        return {**order.summary(), "changed": changed}
