"""
Order Domain Models

Represents orders, their line items and payment receipts, plus the
request/response shapes of the checkout endpoints.

Amounts are integers in the gateway's smallest currency unit.
"""
from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictInt, field_validator
from pydantic.alias_generators import to_camel

from app.domain.user import User


class OrderStatus(str, Enum):
    """
    Order lifecycle: created -> paid -> delivered

    Transitions never skip a state and never move backward.
    """
    CREATED = "created"
    PAID = "paid"
    DELIVERED = "delivered"

    def can_transition_to(self, target: "OrderStatus") -> bool:
        return _NEXT_STATUS.get(self) == target


_NEXT_STATUS = {
    OrderStatus.CREATED: OrderStatus.PAID,
    OrderStatus.PAID: OrderStatus.DELIVERED,
}

COMPLETED_STATUSES = (OrderStatus.PAID, OrderStatus.DELIVERED)


class _ApiModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_dict(self) -> dict:
        """JSON-ready dict with camelCase keys"""
        return self.model_dump(mode="json", by_alias=True)


class OrderLine(_ApiModel):
    """
    One cart line frozen into an order

    Fields:
        id: Line ID
        order_id: Parent order ID
        item_id: Catalog item reference
        size: Size chosen at checkout
        position: Index of the line in the submitted cart
        unit_price: Catalog unit price at order time (major units)
        item_name: Catalog item name (from JOIN, optional)
    """

    id: int = Field(..., description="Order line ID")
    order_id: str = Field(..., description="Parent order ID")
    item_id: str = Field(..., description="Catalog item ID")
    size: str = Field(..., description="Selected size")
    position: int = Field(0, ge=0)
    unit_price: int = Field(..., ge=0, description="Unit price at order time")
    item_name: Optional[str] = Field(None, description="Catalog item name (from JOIN)")


class Payment(_ApiModel):
    """Gateway payment receipt recorded by a successful verification"""

    id: int
    order_id: str
    gateway_payment_id: str
    signature: str
    created_at: datetime


class Order(_ApiModel):
    """
    Order domain model

    Fields:
        id: Order ID (UUID)
        user_id: Owning user
        gateway_order_id: Opaque payment gateway order ID (unique)
        amount: Total in currency sub-units, fixed at creation
        currency: ISO currency code, fixed at creation
        status: created | paid | delivered
        address_snapshot: Shipping address copied from the user at creation
        created_at: Creation timestamp
        completed_at: Set once, when the order becomes paid
        lines: Ordered line items
        payment: Payment receipt (optional, from JOIN)
        user: Owning user (optional, from JOIN)
    """

    id: str
    user_id: int
    gateway_order_id: str
    amount: int = Field(..., gt=0)
    currency: str
    status: OrderStatus
    address_snapshot: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None
    lines: List[OrderLine] = Field(default_factory=list)
    payment: Optional[Payment] = None
    user: Optional[User] = None

    @property
    def is_delivered(self) -> bool:
        return self.status == OrderStatus.DELIVERED

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["isDelivered"] = self.is_delivered
        return data


class NewOrderLine(BaseModel):
    """A validated line ready to be persisted"""
    item_id: str
    size: str
    unit_price: int


class OrderCreate(BaseModel):
    """Schema for persisting a new order (all values server-computed)"""
    user_id: int
    gateway_order_id: str
    amount: int
    currency: str
    address_snapshot: Optional[str] = None
    lines: List[NewOrderLine]


# ----------------------------------------------------------------------------
# Request / response shapes
# ----------------------------------------------------------------------------

class CartLine(BaseModel):
    """One entry of a submitted cart"""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    item_id: str = Field(..., validation_alias=AliasChoices("itemId", "dressId", "item_id"), min_length=1)
    size: str = Field(..., min_length=1)


class CartSubmission(BaseModel):
    """Client-submitted cart: declared total plus the lines it covers"""

    amount: StrictInt = Field(..., gt=0, description="Declared total in currency sub-units")
    currency: str = Field(..., min_length=3, max_length=3)
    items: List[CartLine] = Field(..., min_length=1, validation_alias=AliasChoices("items", "dresses"))

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, value: str) -> str:
        return value.upper()


class PaymentVerificationRequest(BaseModel):
    """Payment confirmation relayed from the gateway checkout"""

    gateway_order_id: str = Field(
        ..., min_length=1,
        validation_alias=AliasChoices("orderId", "gatewayOrderId", "razorpay_order_id"),
    )
    gateway_payment_id: str = Field(
        ..., min_length=1,
        validation_alias=AliasChoices("paymentId", "gatewayPaymentId", "razorpay_payment_id"),
    )
    signature: str = Field(
        ..., min_length=1,
        validation_alias=AliasChoices("signature", "razorpay_signature"),
    )


class VerificationResult(BaseModel):
    """Outcome of a payment verification; failure is a normal result"""

    status: Literal["success", "failure"]
    order_id: Optional[str] = None
    already_verified: bool = False

    def to_dict(self) -> dict:
        return {"status": self.status}
