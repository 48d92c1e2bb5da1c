from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.errors import SessionMissing, StaleCartError
from storefront.db.models import Cart
from storefront.schemas.cart import CartItem, CartOwner, CartPrices


def _price_columns(prices: CartPrices) -> dict:
    return {
        "items_price": Decimal(prices.items_price),
        "shipping_price": Decimal(prices.shipping_price),
        "tax_price": Decimal(prices.tax_price),
        "total_price": Decimal(prices.total_price),
    }


async def find_cart(db: AsyncSession, owner: CartOwner) -> Optional[Cart]:
    """Signed-in users are matched by user id, everyone else by session cart id."""
    if owner.user_id:
        condition = Cart.user_id == owner.user_id
    else:
        condition = Cart.session_cart_id == owner.session_cart_id

    result = await db.execute(
        select(Cart)
        .where(condition)
        .order_by(Cart.created_at)
        .limit(1)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def create_cart(
    db: AsyncSession,
    owner: CartOwner,
    items: List[CartItem],
    prices: CartPrices
) -> Cart:
    if not owner.session_cart_id:
        raise SessionMissing()

    cart = Cart(
        session_cart_id=owner.session_cart_id,
        user_id=owner.user_id,
        items=[item.model_dump() for item in items],
        version=1,
        **_price_columns(prices)
    )
    db.add(cart)
    await db.commit()
    await db.refresh(cart)
    return cart


async def update_cart(
    db: AsyncSession,
    cart: Cart,
    items: List[CartItem],
    prices: CartPrices
) -> Cart:
    """
    Replace the item list and prices in one statement.

    The write only lands if nobody else bumped the cart's version since it was
    read; otherwise StaleCartError is raised and nothing is changed.
    """
    result = await db.execute(
        update(Cart)
        .where(Cart.id == cart.id, Cart.version == cart.version)
        .values(
            items=[item.model_dump() for item in items],
            version=Cart.version + 1,
            updated_at=datetime.utcnow(),
            **_price_columns(prices)
        )
        .execution_options(synchronize_session=False)
    )

    if result.rowcount == 0:
        await db.rollback()
        raise StaleCartError()

    await db.commit()
    await db.refresh(cart)
    return cart
