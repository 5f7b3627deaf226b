"""
FastAPI dependencies wiring repositories and services

Long-lived resources (database pool, gateway connector) are created in the
application lifespan and stored on app.state; everything else is built
per request from them. Tests replace these through dependency_overrides.
"""
from fastapi import Depends, Request

from app.connectors.razorpay_connector import RazorpayConnector
from app.core.auth import TokenUser, get_current_user
from app.core.config import settings
from app.core.database import Database
from app.domain.user import AdminCapability
from app.repositories.catalog_repository import CatalogRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.user_repository import UserRepository
from app.services.fulfillment_service import FulfillmentService
from app.services.order_intake_service import OrderIntakeService
from app.services.payment_verification_service import PaymentVerificationService
from app.services.pricing_service import PricingService


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_gateway(request: Request) -> RazorpayConnector:
    return request.app.state.gateway


def get_order_repository(db: Database = Depends(get_database)) -> OrderRepository:
    return OrderRepository(db)


def get_user_repository(db: Database = Depends(get_database)) -> UserRepository:
    return UserRepository(db)


def get_catalog_repository(db: Database = Depends(get_database)) -> CatalogRepository:
    return CatalogRepository(db)


def get_intake_service(
    users: UserRepository = Depends(get_user_repository),
    catalog: CatalogRepository = Depends(get_catalog_repository),
    orders: OrderRepository = Depends(get_order_repository),
    gateway: RazorpayConnector = Depends(get_gateway),
) -> OrderIntakeService:
    pricing = PricingService(catalog, settings.get_currency_subunits())
    return OrderIntakeService(users, pricing, gateway, orders)


def get_verification_service(
    orders: OrderRepository = Depends(get_order_repository),
    gateway: RazorpayConnector = Depends(get_gateway),
) -> PaymentVerificationService:
    return PaymentVerificationService(orders, gateway)


def get_fulfillment_service(
    orders: OrderRepository = Depends(get_order_repository),
) -> FulfillmentService:
    return FulfillmentService(orders)


def require_admin(
    user: TokenUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
) -> AdminCapability:
    """
    Admin capability for the authenticated user

    The role is read from the users table, not from the token.
    """
    return AdminCapability.for_user(users.find_by_id(user.id))
