import uuid
from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, JSON

from storefront.db.base import Base


def new_id() -> str:
    return str(uuid.uuid4())


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    image = Column(String(512), nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    stock = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Cart(Base):
    __tablename__ = "carts"

    id = Column(String(36), primary_key=True, default=new_id)
    session_cart_id = Column(String(255), index=True, nullable=False)
    user_id = Column(String(255), index=True, nullable=True)
    # Ordered list of line-item dicts; see schemas.cart.CartItem
    items = Column(JSON, default=list, nullable=False)
    items_price = Column(Numeric(12, 2), nullable=False)
    shipping_price = Column(Numeric(12, 2), nullable=False)
    tax_price = Column(Numeric(12, 2), nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)
    version = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


__all__ = [
    "Product",
    "Cart",
    "Base"
]
