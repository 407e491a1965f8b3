"""
Process-wide API state: the shared catalog and pricing policy, plus the
registry of open orders (one per register session).
"""
import logging
from typing import Optional

from ..config.settings import get_settings
from ..engine import Catalog, NotFoundError, Order, OrderSnapshot, PricingPolicy
from ..services.customer_service import CustomerService


logger = logging.getLogger(__name__)


class OrderRegistry:
    """Owns open orders by id; checkout removes them."""

    def __init__(self, policy: PricingPolicy):
        self.policy = policy
        self._orders: dict[str, Order] = {}

    def open(self, customer: Optional[str] = None) -> Order:
        order = Order(self.policy, customer=customer)
        self._orders[order.order_id] = order
        logger.info("Opened order %s for %s", order.order_id, customer or "walk-in")
        return order

    def get(self, order_id: str) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            raise NotFoundError(f"Order '{order_id}' not found")
        return order

    def close(self, order_id: str) -> OrderSnapshot:
        """Finalize an order: snapshot it and stop accepting changes."""
        order = self.get(order_id)
        snapshot = order.snapshot()
        del self._orders[order_id]
        logger.info("Closed order %s: %d items, total %s", order_id, snapshot.item_count, snapshot.totals.total)
        return snapshot

    def __len__(self) -> int:
        return len(self._orders)


settings = get_settings()
catalog = Catalog.from_settings(settings)
policy = PricingPolicy.from_settings(settings)
customers = CustomerService(settings.customers_csv)
registry = OrderRegistry(policy)
