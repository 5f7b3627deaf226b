"""
Order-related tables
"""
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class Order(Base):
    """
    Checkout orders

    amount/currency are fixed at creation; status only moves forward.
    """
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Payment gateway reference, set once
    gateway_order_id = Column(String(64), nullable=False, unique=True)

    # Amount in currency sub-units
    amount = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False)

    status = Column(String(20), nullable=False, default="created", index=True)
    address_snapshot = Column(Text)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    completed_at = Column(DateTime(timezone=True))

    __table_args__ = (
        CheckConstraint("status IN ('created', 'paid', 'delivered')", name="orders_status_check"),
        CheckConstraint("amount > 0", name="orders_amount_positive"),
    )

    user = relationship("User", back_populates="orders")
    lines = relationship("OrderLine", back_populates="order", order_by="OrderLine.position")
    payment = relationship("Payment", back_populates="order", uselist=False)


class OrderLine(Base):
    """
    Items of each order, written together with the order
    """
    __tablename__ = "order_lines"

    id = Column(Integer, primary_key=True)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    item_id = Column(String(64), ForeignKey("catalog_items.id"), nullable=False)

    size = Column(String(20), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    # Catalog price at order time (major units)
    unit_price = Column(Integer, nullable=False)

    order = relationship("Order", back_populates="lines")
    item = relationship("CatalogItem")


class Payment(Base):
    """
    Gateway payment receipts, at most one per order
    """
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)

    gateway_payment_id = Column(String(64), nullable=False)
    signature = Column(String(128), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    order = relationship("Order", back_populates="payment")
