"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety and validation across the application.
"""
from app.domain.catalog import CatalogItem
from app.domain.order import (
    CartLine,
    CartSubmission,
    Order,
    OrderLine,
    OrderStatus,
    Payment,
    PaymentVerificationRequest,
    VerificationResult,
)
from app.domain.user import Role, User

__all__ = [
    'CatalogItem',
    'CartLine',
    'CartSubmission',
    'Order',
    'OrderLine',
    'OrderStatus',
    'Payment',
    'PaymentVerificationRequest',
    'VerificationResult',
    'Role',
    'User',
]
