from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.db.models import Product
from storefront.schemas.product import ProductSnapshot


async def get_product(db: AsyncSession, product_id: str) -> Optional[ProductSnapshot]:
    """Current name, slug, price and stock for a product, or None."""
    result = await db.execute(select(Product).where(Product.id == product_id))
    product = result.scalar_one_or_none()

    if not product:
        return None

    return ProductSnapshot.model_validate(product)
