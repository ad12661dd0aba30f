"""Repository for the Order aggregate."""

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.repository(part_of=Order)
class OrderRepository:
    """Order Store access. The provider (memory, postgresql, sqlite) comes from domain config."""

    def find_by_code(self, order_code: str) -> Order | None:
        """Find an Order by its human-readable code."""
        orders = self._dao.query.filter(order_code=order_code).all().items
        return orders[0] if orders else None
