from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.dependencies import get_cart_owner
from storefront.db.session import get_db
from storefront.schemas.cart import ActionResult, CartItemUpdate, CartOwner, CartView
from storefront.services import cart as cart_service

router = APIRouter(prefix="/api/cart", tags=["cart"])

# Client-side hook: pages listening for this event re-fetch the cart
CART_CHANGED_HEADER = "HX-Trigger"
CART_CHANGED_EVENT = "cart-changed"


def _signal_change(response: Response, result: ActionResult) -> ActionResult:
    if result.success:
        response.headers[CART_CHANGED_HEADER] = CART_CHANGED_EVENT
    return result


@router.get("", response_model=Optional[CartView])
async def get_cart(
    owner: CartOwner = Depends(get_cart_owner),
    db: AsyncSession = Depends(get_db)
):
    """Get current shopping cart."""
    return await cart_service.get_cart_view(db, owner)


@router.post("/add", response_model=ActionResult)
async def add_to_cart(
    response: Response,
    item: Dict[str, Any] = Body(...),
    owner: CartOwner = Depends(get_cart_owner),
    db: AsyncSession = Depends(get_db)
):
    """Add item to cart, or raise its quantity if it is already there."""
    # Validated by the service so malformed items come back as an ActionResult
    data = {"qty": 1, **item}
    result = await cart_service.add_or_increment(db, owner, data)
    return _signal_change(response, result)


@router.post("/decrement/{product_id}", response_model=ActionResult)
async def decrement_cart_item(
    product_id: str,
    response: Response,
    owner: CartOwner = Depends(get_cart_owner),
    db: AsyncSession = Depends(get_db)
):
    """Take one unit off a line; the last unit removes it."""
    result = await cart_service.decrement_by_one(db, owner, product_id)
    return _signal_change(response, result)


@router.put("/update", response_model=ActionResult)
async def update_cart_item(
    item: CartItemUpdate,
    response: Response,
    owner: CartOwner = Depends(get_cart_owner),
    db: AsyncSession = Depends(get_db)
):
    """Set cart item quantity."""
    result = await cart_service.set_exact_quantity(db, owner, item.product_id, item.quantity)
    return _signal_change(response, result)


@router.delete("/remove/{product_id}", response_model=ActionResult)
async def remove_from_cart(
    product_id: str,
    response: Response,
    owner: CartOwner = Depends(get_cart_owner),
    db: AsyncSession = Depends(get_db)
):
    """Remove item from cart."""
    result = await cart_service.remove_line(db, owner, product_id)
    return _signal_change(response, result)
