"""
Catalog Domain Model

Catalog items are owned by the catalog store; checkout only reads them.
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class CatalogItem(BaseModel):
    """
    Sellable catalog item

    Fields:
        id: Item identifier
        name: Display name
        price: Unit price in major currency units
        sizes: Sizes the item is offered in
    """

    id: str = Field(..., description="Item ID")
    name: str = Field(..., description="Item name")
    price: int = Field(..., ge=0, description="Unit price (major units)")
    sizes: List[str] = Field(default_factory=list, description="Available sizes")

    model_config = ConfigDict(from_attributes=True, coerce_numbers_to_str=True)
