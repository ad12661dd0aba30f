"""Order placement: command and handler."""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.errors import OrderCodeConflictError
from ordering.order.codes import MAX_CODE_ATTEMPTS, get_code_generator
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    """Persist a validated order submission as a pending order."""

    email = String(required=True, max_length=254)
    name = String(max_length=255)
    phone = String(max_length=50)
    shipping_address = Text(required=True)  # JSON: normalized address dict
    billing_address = Text(required=True)  # JSON: normalized address dict
    items = Text(required=True)  # JSON: list of line item dicts
    payment_method = String(required=True, max_length=50)
    total = Float(required=True, min_value=0.0)
    client_total = Float()
    total_flagged = Boolean(default=False)
    currency = String(max_length=3, default="USD")


def _is_code_collision(exc: ValidationError) -> bool:
    return "order_code" in exc.messages


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        """Persist the order under a fresh order code.

        A code is a collision when ``find_by_code`` already sees it, or when the
        store's uniqueness check rejects it on ``add``. Either way a new code is
        drawn, up to ``MAX_CODE_ATTEMPTS`` times.
        """
        repo = current_domain.repository_for(Order)
        generate = get_code_generator()

        for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
            order_code = generate()
            if repo.find_by_code(order_code) is None:
                order = self._build_order(command, order_code)
                try:
                    repo.add(order)
                except ValidationError as exc:
                    if not _is_code_collision(exc):
                        raise
                else:
                    logger.info(
                        "order.placed",
                        order_id=str(order.id),
                        order_code=order_code,
                        total=order.total,
                        payment_method=order.payment_method,
                    )
                    return order.summary()

            logger.warning("order.code_collision", order_code=order_code, attempt=attempt)

        raise OrderCodeConflictError(MAX_CODE_ATTEMPTS)

    @staticmethod
    def _build_order(command, order_code):
        return Order.place(
            order_code=order_code,
            email=command.email,
            name=command.name,
            phone=command.phone,
            items_data=json.loads(command.items),
            shipping_address=json.loads(command.shipping_address),
            billing_address=json.loads(command.billing_address),
            payment_method=command.payment_method,
            total=command.total,
            client_total=command.client_total,
            total_flagged=command.total_flagged or False,
            currency=command.currency or "USD",
        )
