from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from storefront.core.money import round2


class CartOwner(BaseModel):
    """Who a cart belongs to: the anonymous session and, once signed in, the user."""
    session_cart_id: Optional[str] = None
    user_id: Optional[str] = None

    class Config:
        frozen = True


class CartItem(BaseModel):
    product_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    image: str = Field(..., min_length=1)
    price: str
    qty: int = Field(..., ge=1)

    @field_validator("price", mode="before")
    @classmethod
    def normalize_price(cls, value) -> str:
        amount = round2(value)
        if amount < 0:
            raise ValueError("Price must not be negative")
        return f"{amount:.2f}"


class CartItemUpdate(BaseModel):
    product_id: str = Field(..., min_length=1)
    quantity: int


class CartPrices(BaseModel):
    items_price: str
    shipping_price: str
    tax_price: str
    total_price: str


class CartView(CartPrices):
    id: str
    session_cart_id: str
    user_id: Optional[str] = None
    items: List[CartItem]
    item_count: int


class ActionResult(BaseModel):
    success: bool
    message: str
