"""
Fulfillment Service
Privileged paid -> delivered transition
"""
import logging

from app.core.errors import Forbidden, OrderNotFound, OrderNotPayable
from app.domain.order import Order, OrderStatus
from app.domain.user import AdminCapability
from app.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class FulfillmentService:
    """Service for marking orders delivered"""

    def __init__(self, orders: OrderRepository):
        self.orders = orders

    def mark_delivered(self, order_id: str, capability: AdminCapability) -> Order:
        """
        Mark a paid order as delivered

        Delivering an already delivered order returns it unchanged.

        Raises:
            Forbidden: No admin capability supplied
            OrderNotFound: Unknown order
            OrderNotPayable: Order has not been paid
        """
        if not isinstance(capability, AdminCapability):
            raise Forbidden("Admin role required")

        order = self._get(order_id)

        if order.status == OrderStatus.PAID:
            if self.orders.transition_status(order_id, OrderStatus.PAID, OrderStatus.DELIVERED):
                logger.info(f"Order {order_id} delivered (by user {capability.actor_id})")
            # Either we moved it or a concurrent call did; status only moves forward
            order = self._get(order_id)

        if order.status == OrderStatus.CREATED:
            logger.warning(f"Refusing to deliver unpaid order {order_id} (by user {capability.actor_id})")
            raise OrderNotPayable(f"Order {order_id} has not been paid")

        return order

    def _get(self, order_id: str) -> Order:
        order = self.orders.find_by_id(order_id)
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found")
        return order
