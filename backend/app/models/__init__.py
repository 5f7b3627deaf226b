"""
Database models (schema definition)
"""
from .order import Order, OrderLine, Payment
from .user import CatalogItem, User

__all__ = [
    "Order",
    "OrderLine",
    "Payment",
    "CatalogItem",
    "User",
]
