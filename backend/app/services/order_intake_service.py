"""
Order Intake Service
Turns a submitted cart into a persisted order awaiting payment

Steps:
1. Resolve the acting user
2. Validate the declared amount against the catalog
3. Open a gateway order for the validated amount
4. Persist order + lines in one transaction
"""
import logging
import secrets

from starlette.concurrency import run_in_threadpool

from app.connectors.razorpay_connector import RazorpayConnector
from app.core.errors import UserNotFound
from app.domain.order import CartSubmission, Order, OrderCreate
from app.repositories.order_repository import OrderRepository
from app.repositories.user_repository import UserRepository
from app.services.pricing_service import PricingService

logger = logging.getLogger(__name__)


def new_receipt() -> str:
    """Fresh receipt token, unique per intake attempt"""
    return secrets.token_urlsafe(16)


class OrderIntakeService:
    """Service for creating orders from carts"""

    def __init__(
        self,
        users: UserRepository,
        pricing: PricingService,
        gateway: RazorpayConnector,
        orders: OrderRepository,
    ):
        self.users = users
        self.pricing = pricing
        self.gateway = gateway
        self.orders = orders

    async def create_order(self, user_id: int, cart: CartSubmission) -> Order:
        """
        Create an order in `created` state

        Gateway failures are not retried and leave nothing behind locally;
        the caller resubmits the whole cart.

        Raises:
            UserNotFound, UnsupportedCurrency, ItemNotFound, AmountMismatch,
            GatewayUnavailable
        """
        user = await run_in_threadpool(self.users.find_by_id, user_id)
        if user is None:
            raise UserNotFound(f"User {user_id} not found")

        total = await run_in_threadpool(self.pricing.validate, cart.items, cart.amount, cart.currency)

        gateway_order_id = await self.gateway.create_order(total.amount, total.currency, new_receipt())

        new_order = OrderCreate(
            user_id=user.id,
            gateway_order_id=gateway_order_id,
            amount=total.amount,
            currency=total.currency,
            address_snapshot=user.address,
            lines=total.lines,
        )

        try:
            order = await run_in_threadpool(self.orders.create, new_order)
        except Exception:
            # Gateway order exists but has no local record; reconciled by operators
            logger.exception(
                f"Orphaned gateway order {gateway_order_id}: persistence failed "
                f"(user={user.id}, amount={total.amount} {total.currency})"
            )
            raise

        logger.info(
            f"Order {order.id} created for user {user.id}: "
            f"{order.amount} {order.currency}, gateway order {gateway_order_id}"
        )
        return order
