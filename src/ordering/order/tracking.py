"""Tracking assignment: command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class AssignTracking:
    """Hand the order to a carrier, or correct the tracking already on it."""

    order_id = Identifier(required=True)
    tracking_number = String(required=True, max_length=255)
    carrier = String(max_length=100)
    tracking_url = String(max_length=1024)


@ordering.command_handler(part_of=Order)
class AssignTrackingHandler:
    @handle(AssignTracking)
    def assign_tracking(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.assign_tracking(
            tracking_number=command.tracking_number,
            carrier=command.carrier,
            tracking_url=command.tracking_url,
        )
        repo.add(order)
        logger.info(
            "order.tracking_assigned",
            order_id=str(order.id),
            carrier=command.carrier,
            tracking_number=command.tracking_number,
        )
        return order.summary()
