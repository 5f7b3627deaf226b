"""
User and catalog tables (read by checkout, managed elsewhere)
"""
from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String(255))
    email = Column(String(255), unique=True, nullable=False)
    address = Column(Text)
    role = Column(String(20), nullable=False, default="CUSTOMER")

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    orders = relationship("Order", back_populates="user")


class CatalogItem(Base):
    __tablename__ = "catalog_items"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    # Unit price in major currency units
    price = Column(Integer, nullable=False)
    sizes = Column(ARRAY(String(20)), nullable=False, default=list)
