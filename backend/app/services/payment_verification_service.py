"""
Payment Verification Service
Reconciles a payment confirmation with the order it claims to pay

The confirmation comes from an untrusted caller (gateway redirect relayed
by the browser), so authenticity rests entirely on the HMAC signature.
A bad signature is a normal negative outcome, not an error.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from app.connectors.razorpay_connector import RazorpayConnector
from app.core.errors import OrderNotFound
from app.domain.order import VerificationResult
from app.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PaymentVerificationService:
    """
    Service for verifying gateway payments

    Verification is idempotent: replaying a successful confirmation
    reports success again without writing anything.
    """

    def __init__(
        self,
        orders: OrderRepository,
        gateway: RazorpayConnector,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.orders = orders
        self.gateway = gateway
        self.clock = clock or utc_now

    def verify(self, gateway_order_id: str, gateway_payment_id: str, signature: str) -> VerificationResult:
        """
        Verify a payment and mark its order paid

        Args:
            gateway_order_id: Gateway order the payment belongs to
            gateway_payment_id: Gateway payment ID
            signature: Signature presented by the caller

        Returns:
            VerificationResult (status "success" or "failure")

        Raises:
            OrderNotFound: No order carries this gateway order ID
        """
        order = self.orders.find_by_gateway_order_id(gateway_order_id)
        if order is None:
            raise OrderNotFound(f"No order for gateway order {gateway_order_id}")

        if not self.gateway.verify_payment_signature(gateway_order_id, gateway_payment_id, signature):
            logger.warning(
                f"Signature mismatch for order {order.id} "
                f"(gateway order {gateway_order_id}, payment {gateway_payment_id})"
            )
            return VerificationResult(status="failure", order_id=order.id)

        payment = self.orders.record_payment(order.id, gateway_payment_id, signature, self.clock())

        if payment is None:
            logger.info(f"Order {order.id} already verified, payment {gateway_payment_id} not recorded again")
            return VerificationResult(status="success", order_id=order.id, already_verified=True)

        logger.info(f"Order {order.id} paid (payment {gateway_payment_id})")
        return VerificationResult(status="success", order_id=order.id)
