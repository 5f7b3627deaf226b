"""
Orders API Endpoints
Checkout: order creation, payment verification and the customer's order history
"""
from fastapi import APIRouter, Depends, status

from app.api.dependencies import (
    get_intake_service,
    get_order_repository,
    get_verification_service,
)
from app.core.auth import TokenUser, get_current_user
from app.domain.order import CartSubmission, PaymentVerificationRequest
from app.repositories.order_repository import OrderRepository
from app.services.order_intake_service import OrderIntakeService
from app.services.payment_verification_service import PaymentVerificationService

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_order(
    cart: CartSubmission,
    user: TokenUser = Depends(get_current_user),
    service: OrderIntakeService = Depends(get_intake_service),
):
    """
    Create an order from the submitted cart

    The declared amount must match the catalog total exactly. Returns the
    order with its gateway order ID, used by the client to open checkout.
    """
    order = await service.create_order(user.id, cart)
    return order.to_dict()


@router.post("/payment/verify")
def verify_payment(
    body: PaymentVerificationRequest,
    service: PaymentVerificationService = Depends(get_verification_service),
):
    """
    Verify a gateway payment confirmation

    Unauthenticated: the signature is the proof. Returns
    {"status": "success"} or {"status": "failure"}.
    """
    result = service.verify(body.gateway_order_id, body.gateway_payment_id, body.signature)
    return result.to_dict()


@router.get("/me")
def get_my_orders(
    user: TokenUser = Depends(get_current_user),
    orders: OrderRepository = Depends(get_order_repository),
):
    """
    Paid and delivered orders of the authenticated user
    """
    return [order.to_dict() for order in orders.find_completed_by_user(user.id)]
