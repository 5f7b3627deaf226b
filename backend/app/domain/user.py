"""
User Domain Model (lightweight, checkout context)

Registration and login live elsewhere; checkout only reads the shipping
address and the role.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.core.errors import Forbidden


class Role(str, Enum):
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"


class User(BaseModel):
    """Account owning orders"""

    id: int = Field(..., description="User ID")
    name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Email")
    address: Optional[str] = Field(None, description="Current shipping address")
    role: Role = Field(Role.CUSTOMER, description="CUSTOMER or ADMIN")

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class AdminCapability:
    """
    Proof that the acting user holds the ADMIN role

    Obtained through `for_user`. Privileged services take it as an argument
    instead of inspecting request state themselves.
    """
    actor_id: int

    @classmethod
    def for_user(cls, user: Optional[User]) -> "AdminCapability":
        if user is None or not user.is_admin:
            raise Forbidden("Admin role required")
        return cls(actor_id=user.id)
