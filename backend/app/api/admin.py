"""
Admin API - Order management
Listing completed orders and marking them delivered
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_fulfillment_service, get_order_repository, require_admin
from app.domain.order import COMPLETED_STATUSES, OrderStatus
from app.domain.user import AdminCapability
from app.repositories.order_repository import OrderRepository
from app.services.fulfillment_service import FulfillmentService

router = APIRouter()


@router.get("/orders")
def list_orders(
    status: Optional[List[OrderStatus]] = Query(None, description="Statuses to include (default: paid, delivered)"),
    capability: AdminCapability = Depends(require_admin),
    orders: OrderRepository = Depends(get_order_repository),
):
    """
    Orders with owning user, lines and payment receipt
    """
    statuses = status or list(COMPLETED_STATUSES)
    return [order.to_dict() for order in orders.find_all(statuses)]


@router.put("/orders/{order_id}/deliver")
def mark_delivered(
    order_id: str,
    capability: AdminCapability = Depends(require_admin),
    service: FulfillmentService = Depends(get_fulfillment_service),
):
    """
    Mark a paid order as delivered

    Returns 409 OrderNotPayable while the order is unpaid.
    """
    return service.mark_delivered(order_id, capability).to_dict()
