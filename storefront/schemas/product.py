from pydantic import BaseModel
from decimal import Decimal
from typing import Optional


class ProductSnapshot(BaseModel):
    id: str
    name: str
    slug: str
    price: Decimal
    stock: int
    image: Optional[str] = None

    class Config:
        from_attributes = True
